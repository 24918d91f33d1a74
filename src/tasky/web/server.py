from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from tasky.app import App
from tasky.config import Config
from tasky.errors import CookieReadError, OperationTimeoutError, PageRedirectError, UserError
from tasky.web.error_handlers import (
    cookie_error_handler,
    general_exception_handler,
    operation_timeout_handler,
    page_redirect_handler,
    user_error_handler,
)
from tasky.web.routers import auth_router, pages_router, session_router


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Create and configure FastAPI application."""

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        """Connects to the backend before serving; an unreachable backend aborts startup."""
        async with app_instance.lifespan():
            yield

    app = FastAPI(title="tasky", lifespan=lifespan)
    app.state.app = app_instance
    app.state.config = config

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    app.include_router(pages_router)
    app.include_router(auth_router)
    app.include_router(session_router, prefix="/api")

    # Register error handlers
    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(PageRedirectError, page_redirect_handler)
    app.add_exception_handler(CookieReadError, cookie_error_handler)
    app.add_exception_handler(OperationTimeoutError, operation_timeout_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    return app
