import structlog
from fastapi import Request
from fastapi.responses import JSONResponse, RedirectResponse, Response

from tasky.errors import (
    AuthenticationError,
    CookieReadError,
    NotFoundError,
    OperationTimeoutError,
    PageRedirectError,
    ValidationError,
)

logger = structlog.get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "internal error"


def create_json_error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def user_error_handler(_: Request, exc: Exception) -> Response:
    """Handle all UserError subclasses with appropriate status codes."""
    if isinstance(exc, AuthenticationError):
        status_code = 401
    elif isinstance(exc, NotFoundError):
        status_code = 404
    elif isinstance(exc, ValidationError):
        status_code = 400
    else:
        status_code = 400

    return create_json_error_response(status_code=status_code, message=str(exc))


async def page_redirect_handler(_: Request, exc: Exception) -> Response:
    location = exc.location if isinstance(exc, PageRedirectError) else "/"
    return RedirectResponse(url=location, status_code=302)


async def cookie_error_handler(request: Request, exc: Exception) -> Response:
    logger.error("session_cookie_unreadable", path=request.url.path, exc_info=exc)
    return create_json_error_response(status_code=500, message=INTERNAL_ERROR_MESSAGE)


async def operation_timeout_handler(request: Request, exc: Exception) -> Response:
    """Storage deadline exceeded; the operation is treated as not applied."""
    logger.warning("operation_timeout", path=request.url.path)
    return create_json_error_response(status_code=504, message=str(exc))


async def general_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle unexpected errors (500)."""
    logger.error("unexpected_error", path=request.url.path, exc_info=exc)
    return create_json_error_response(status_code=500, message=INTERNAL_ERROR_MESSAGE)
