"""Pooled MongoDB access with per-operation deadlines."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any
from uuid import UUID, uuid4

import pymongo
import structlog
from pydantic import BaseModel, ConfigDict, Field
from pymongo import AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from tasky.config import Config
from tasky.errors import BackendUnavailableError, OperationTimeoutError

logger = structlog.get_logger(__name__)

ClientFactory = Callable[..., AsyncMongoClient[dict[str, Any]]]


class MongoModel(BaseModel):
    id: UUID = Field(alias="_id", serialization_alias="id", default_factory=uuid4)

    model_config = ConfigDict(populate_by_name=True)

    def to_mongo(self) -> dict[str, Any]:
        """Convert the model to a dictionary for MongoDB storage with _id field."""
        data = self.model_dump()
        if "id" in data:
            data["_id"] = data.pop("id")  # Rename id → _id for MongoDB
        return data


@dataclass(frozen=True)
class OperationContext:
    """Deadline handle for exactly one storage operation."""

    deadline: float  # event loop clock

    @classmethod
    def start(cls, timeout: float) -> OperationContext:
        return cls(asyncio.get_running_loop().time() + timeout)

    def remaining(self) -> float:
        return max(0.0, self.deadline - asyncio.get_running_loop().time())


class ConnectionManager:
    """Owns the process-wide connection pool and hands out operation deadlines.

    The pool itself lives in the pymongo client, which is safe for concurrent
    use; when every slot is busy an operation waits for one until its own
    deadline runs out.
    """

    def __init__(self, config: Config, client_factory: ClientFactory = AsyncMongoClient) -> None:
        self._config = config
        self._client_factory = client_factory
        self._client: AsyncMongoClient[dict[str, Any]] | None = None
        self._database: AsyncDatabase[dict[str, Any]] | None = None

    @property
    def operation_timeout(self) -> float:
        return self._config.operation_timeout

    @property
    def client(self) -> AsyncMongoClient[dict[str, Any]]:
        if self._client is None:
            raise RuntimeError("ConnectionManager is not initialized")
        return self._client

    @property
    def database(self) -> AsyncDatabase[dict[str, Any]]:
        if self._database is None:
            raise RuntimeError("ConnectionManager is not initialized")
        return self._database

    def collection(self, name: str) -> AsyncCollection[dict[str, Any]]:
        return self.database.get_collection(name)

    async def initialize(self) -> None:
        """Create the pooled client and verify the backend answers a ping.

        Raises:
            BackendUnavailableError: If the backend cannot be reached. The process
                must not start serving in that case.
        """
        if self._client is not None:
            return
        config = self._config
        client = self._client_factory(
            config.mongodb_uri,
            uuidRepresentation="standard",
            maxPoolSize=config.max_pool_size,
            minPoolSize=config.min_pool_size,
            maxIdleTimeMS=int(config.max_idle_time * 1000),
            serverSelectionTimeoutMS=int(config.server_selection_timeout * 1000),
            connectTimeoutMS=int(config.connect_timeout * 1000),
            socketTimeoutMS=int(config.socket_timeout * 1000),
        )
        try:
            with pymongo.timeout(config.connect_timeout):
                await client.admin.command("ping")
        except PyMongoError as e:
            logger.error("backend_unreachable", database=config.database_name, error=str(e))
            await client.aclose()
            raise BackendUnavailableError("Failed to reach MongoDB") from e

        self._client = client
        self._database = client.get_database(config.database_name)
        logger.info("connection_manager_ready", database=config.database_name, max_pool_size=config.max_pool_size)

    @asynccontextmanager
    async def operation(self) -> AsyncIterator[OperationContext]:
        """Run one storage operation under a fresh deadline.

        The deadline covers waiting for a pool slot and the round-trip itself.
        Use a new context for every operation; do not hold one across several.

        Raises:
            OperationTimeoutError: If the deadline elapses first.
        """
        ctx = OperationContext.start(self._config.operation_timeout)
        try:
            with pymongo.timeout(ctx.remaining()):
                async with asyncio.timeout_at(ctx.deadline):
                    yield ctx
        except TimeoutError as e:
            raise OperationTimeoutError from e
        except PyMongoError as e:
            if e.timeout:
                raise OperationTimeoutError from e
            raise

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            self._database = None
