import logging
import time

from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import declarative_base, sessionmaker

from storefront_api.config import settings

logger = logging.getLogger(__name__)

engine = create_engine(settings.database_url, future=True)
SessionLocal = sessionmaker(bind=engine, expire_on_commit=False, future=True)
Base = declarative_base()


def init_db(attempts: int = 30) -> None:
    from storefront_api.store import inventory_models, sale_models  # noqa: F401

    # the database container may still be starting
    for attempt in range(1, attempts + 1):
        try:
            Base.metadata.create_all(bind=engine)
            return
        except OperationalError as e:
            if attempt == attempts:
                raise
            logger.warning("Database not ready (attempt %d/%d): %s", attempt, attempts, e)
            time.sleep(1)
