from http import HTTPStatus


class StorefrontError(Exception):
    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class BadRequestError(StorefrontError):
    status_code = HTTPStatus.BAD_REQUEST


class NotFoundError(StorefrontError):
    status_code = HTTPStatus.NOT_FOUND


class UpstreamError(StorefrontError):
    """A backend or third-party dependency failed; message is passed through."""


class PaymentProviderError(UpstreamError):
    pass
