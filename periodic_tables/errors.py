import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ReservationSystemError(Exception):
    """Base error carrying the HTTP status returned to the caller."""

    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class InvalidInput(ReservationSystemError):
    def __init__(self, message: str):
        super().__init__(message, status.HTTP_400_BAD_REQUEST)


class NotFound(ReservationSystemError):
    def __init__(self, message: str):
        super().__init__(message, status.HTTP_404_NOT_FOUND)


def _error_body(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"status": status_code, "message": message})


async def reservation_system_error_handler(request: Request, exc: ReservationSystemError) -> JSONResponse:
    logger.debug("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return _error_body(exc.status_code, exc.message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        message = f"Path not found: {request.url.path}"
    elif exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        message = f"{request.method} not allowed for {request.url.path}"
    else:
        message = str(exc.detail)
    return _error_body(exc.status_code, message)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        location = ".".join(
            part for part in errors[0].get("loc", ())
            if isinstance(part, str) and part not in ("body", "path", "query")
        )
        message = f"Invalid input: {location}" if location else "Invalid request body"
    else:
        message = "Invalid request"
    logger.debug("Request validation failed: %s", errors)
    return _error_body(status.HTTP_400_BAD_REQUEST, message)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_body(status.HTTP_500_INTERNAL_SERVER_ERROR, "Something went wrong!")


EXCEPTION_HANDLERS = {
    ReservationSystemError: reservation_system_error_handler,
    StarletteHTTPException: http_exception_handler,
    RequestValidationError: validation_error_handler,
    Exception: unhandled_exception_handler,
}


def register_exception_handlers(app):
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)
