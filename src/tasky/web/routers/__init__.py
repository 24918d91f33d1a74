from tasky.web.routers.auth import router as auth_router
from tasky.web.routers.pages import router as pages_router
from tasky.web.routers.session import router as session_router

__all__ = [
    "auth_router",
    "pages_router",
    "session_router",
]
