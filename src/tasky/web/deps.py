"""Request authentication gates.

Both gates share the same token validation and differ only in how a failure
reaches the client: page routes redirect to the entry page, data routes get
a JSON error.
"""

from typing import Annotated, cast

import structlog
from fastapi import Depends, Request

from tasky.app import App
from tasky.config import Config
from tasky.core.modules.token.models import Claims, TokenFailure, TokenStatus, ValidationResult
from tasky.errors import AuthenticationError, CookieReadError, PageRedirectError
from tasky.web.cookies import read_session_cookie

logger = structlog.get_logger(__name__)

ENTRY_ROUTE = "/"

NO_SESSION_MESSAGE = "session expired, please login again"
BAD_SIGNATURE_MESSAGE = "unauthorized: invalid signature"
INVALID_TOKEN_MESSAGE = "unauthorized: invalid token"


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_config(request: Request) -> Config:
    return cast(Config, request.app.state.config)


def api_failure(result: ValidationResult) -> AuthenticationError:
    """Map a failed validation to the error shown to data-route clients."""
    if result.status == TokenStatus.ABSENT:
        return AuthenticationError(NO_SESSION_MESSAGE)
    if result.failure == TokenFailure.BAD_SIGNATURE:
        return AuthenticationError(BAD_SIGNATURE_MESSAGE)
    return AuthenticationError(INVALID_TOKEN_MESSAGE)


def page_failure(_: ValidationResult) -> PageRedirectError:
    return PageRedirectError(ENTRY_ROUTE)


async def require_page_session(request: Request, app: Annotated[App, Depends(get_app)]) -> Claims:
    """Gate for page routes: any failure redirects to the entry page."""
    try:
        token = read_session_cookie(request)
    except CookieReadError:
        logger.exception("session_cookie_unreadable", path=request.url.path)
        raise PageRedirectError(ENTRY_ROUTE) from None

    result = app.check_session(token)
    if not result.is_valid or result.claims is None:
        raise page_failure(result)
    return result.claims


async def require_api_session(request: Request, app: Annotated[App, Depends(get_app)]) -> Claims:
    """Gate for data routes: failures become 401 JSON errors, cookie defects 500."""
    token = read_session_cookie(request)  # CookieReadError is rendered as a 500
    result = app.check_session(token)
    if not result.is_valid or result.claims is None:
        if result.failure is not None:
            logger.info("session_rejected", path=request.url.path, reason=result.failure.value)
        raise api_failure(result)
    return result.claims


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
ConfigDep = Annotated[Config, Depends(get_config)]
PageSessionDep = Annotated[Claims, Depends(require_page_session)]
ApiSessionDep = Annotated[Claims, Depends(require_api_session)]
