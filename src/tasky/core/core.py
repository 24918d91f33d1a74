from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import TYPE_CHECKING

from tasky.config import Config
from tasky.core.db import ClientFactory, ConnectionManager
from tasky.core.modules.credential.service import CredentialService
from tasky.core.modules.token.service import TokenService

if TYPE_CHECKING:
    from tasky.core.modules.user.service import UserService


class Service:
    """Base class for services with storage access."""

    def __init__(self, connections: ConnectionManager) -> None:
        self.connections = connections
        self._core: Core | None = None

    async def on_start(self) -> None:
        """Initialize service on application startup."""

    async def on_stop(self) -> None:
        """Cleanup service on application shutdown."""

    @property
    def core(self) -> Core:
        """Get the core application context."""
        if self._core is None:
            raise RuntimeError("Core not set for service")
        return self._core

    def set_core(self, core: Core) -> None:
        """Set the core application context."""
        self._core = core


class Services:
    """Service registry for storage-backed services."""

    user: UserService

    def __init__(self, connections: ConnectionManager) -> None:
        from tasky.core.modules.user.service import UserService  # noqa: PLC0415

        self.user = UserService(connections)
        self._services: list[Service] = [self.user]

    def set_core(self, core: Core) -> None:
        """Set core reference for all services."""
        for service in self._services:
            service.set_core(core)

    async def start_all(self) -> None:
        """Start all services that have startup logic."""
        for service in self._services:
            await service.on_start()

    async def stop_all(self) -> None:
        """Stop all services that have cleanup logic."""
        for service in self._services:
            await service.on_stop()


class Core:
    """Container providing config, the connection pool, and all service instances."""

    config: Config
    connections: ConnectionManager
    tokens: TokenService
    credentials: CredentialService
    services: Services

    def __init__(self, config: Config, client_factory: ClientFactory | None = None) -> None:
        """Wire the connection manager and services from a single config object.

        Nothing connects here; the pool is created by `on_start`.
        """
        self.config = config
        if client_factory is None:
            self.connections = ConnectionManager(config)
        else:
            self.connections = ConnectionManager(config, client_factory)
        self.tokens = TokenService(
            config.secret_key,
            ttl=timedelta(seconds=config.token_ttl),
            refresh_threshold=timedelta(seconds=config.refresh_threshold),
        )
        self.credentials = CredentialService(config.bcrypt_rounds)
        self.services = Services(self.connections)
        self.services.set_core(self)

    @asynccontextmanager
    async def lifespan(self) -> AsyncIterator[None]:
        """Manage application lifecycle - startup and shutdown."""
        await self.on_start()
        try:
            yield
        finally:
            await self.on_stop()

    async def on_start(self) -> None:
        """Connect to the backend (fail fast) and start services."""
        await self.connections.initialize()
        await self.services.start_all()

    async def on_stop(self) -> None:
        """Stop services and close the connection pool on shutdown."""
        await self.services.stop_all()
        await self.connections.close()
