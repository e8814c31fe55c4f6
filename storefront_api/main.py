import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from storefront_api.api.account.account_routes import account_router
from storefront_api.api.checkout.checkout_routes import checkout_router
from storefront_api.api.products.product_routes import product_router
from storefront_api.config import settings
from storefront_api.errors import StorefrontError
from storefront_api.store.db import init_db


def log_level(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


logging.basicConfig(
    level=log_level(settings.log_level),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)

app = FastAPI(title="Storefront API")

app.include_router(checkout_router)
app.include_router(product_router)
app.include_router(account_router)


@app.exception_handler(StorefrontError)
async def _storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


@app.on_event("startup")
def _on_startup() -> None:
    init_db()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("storefront_api.main:app", host="0.0.0.0", port=8000, reload=True)
