from fastapi import Request
from fastapi.responses import Response
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

logger = logging.getLogger(__name__)

# Error bodies are plain text but keep the JSON content type of the API.
ERROR_MEDIA_TYPE = "application/json"

NOT_FOUND_BODY = "not found"
FORTUNE_NOT_FOUND_BODY = "fortune not found"
INTERNAL_ERROR_BODY = "internal server error"
BAD_REQUEST_BODY = "bad request"


class FortuneException(Exception):
    """Base exception for the fortune service"""

    def __init__(
        self, message: str, status_code: int = 500, body: str = INTERNAL_ERROR_BODY
    ):
        self.message = message
        self.status_code = status_code
        self.body = body
        super().__init__(self.message)


class FortuneNotFound(FortuneException):
    """Requested fortune or route does not exist"""

    def __init__(self, message: str = "fortune not found", body: str = FORTUNE_NOT_FOUND_BODY):
        super().__init__(message, status_code=404, body=body)


class SerializationFailure(FortuneException):
    """Response body could not be encoded"""

    def __init__(self, message: str):
        super().__init__(message, status_code=500)


class DecodeFailure(FortuneException):
    """Request body could not be decoded into a fortune"""

    def __init__(self, message: str, status_code: int = 500):
        body = BAD_REQUEST_BODY if status_code == 400 else INTERNAL_ERROR_BODY
        super().__init__(message, status_code=status_code, body=body)


class SecondaryStoreError(Exception):
    """Redis call failed. Absorbed by the store, never sent to clients."""


def error_response(status_code: int, body: str) -> Response:
    return Response(content=body, status_code=status_code, media_type=ERROR_MEDIA_TYPE)


async def fortune_exception_handler(request: Request, exc: FortuneException):
    """Handle custom fortune exceptions"""
    log = logger.info if exc.status_code < 500 else logger.error
    log(
        f"Fortune exception: {exc.message}",
        extra={
            "path": request.url.path,
            "method": request.method,
            "status": exc.status_code,
        },
    )
    return error_response(exc.status_code, exc.body)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Unmatched routes and methods all answer 404 'not found'"""
    if exc.status_code in (404, 405):
        return error_response(404, NOT_FOUND_BODY)
    return error_response(exc.status_code, str(exc.detail))


async def generic_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions"""
    logger.exception(
        f"Unexpected error: {str(exc)}",
        extra={
            "path": request.url.path,
            "method": request.method,
        },
    )

    # Don't leak implementation details
    return error_response(500, INTERNAL_ERROR_BODY)
