from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime

from pydantic import BaseModel

from tasky.config import Config
from tasky.core.core import Core
from tasky.core.db import ClientFactory
from tasky.core.modules.token.models import IssuedToken, ValidationResult
from tasky.core.modules.user.models import User


class LoginResult(BaseModel):
    """Outcome of a successful login.

    `issued` is None when the presented session still has enough lifetime
    left; `expires_at` is then the expiry of that existing session.
    """

    user: User
    issued: IssuedToken | None
    expires_at: datetime | None


class App:
    """Facade for all application operations, delegating to Core."""

    def __init__(self, config: Config, client_factory: ClientFactory | None = None) -> None:
        self._core = Core(config, client_factory)

    @asynccontextmanager
    async def lifespan(self) -> AsyncIterator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    def check_session(self, token: str | None) -> ValidationResult:
        """Validate a presented session token."""
        return self._core.tokens.validate(token)

    async def signup(self, email: str, password: str, name: str) -> tuple[User, IssuedToken]:
        """Create a user and open a session for it."""
        user = await self._core.services.user.create_user(email, password, name)
        return user, self._core.tokens.issue(str(user.id))

    async def login(self, email: str, password: str, current_token: str | None) -> LoginResult:
        """Verify credentials, then keep or replace the presented session token."""
        user = await self._core.services.user.authenticate(email, password)
        decision = self._core.tokens.decide_refresh(current_token)
        if not decision.should_issue_new and self._session_subject(current_token) == str(user.id):
            return LoginResult(user=user, issued=None, expires_at=decision.current_expiry)
        issued = self._core.tokens.issue(str(user.id))
        return LoginResult(user=user, issued=issued, expires_at=issued.expires_at)

    def _session_subject(self, token: str | None) -> str | None:
        claims = self._core.tokens.validate(token).claims
        return claims.subject if claims else None
