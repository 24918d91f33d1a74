"""Shared pytest fixtures.

The fake Mongo client mimics the parts of AsyncMongoClient the services use.
Its connection pool is a semaphore sized from the `maxPoolSize` option the
ConnectionManager passes in, so pool-bound behavior can be observed without a
running MongoDB.
"""

import asyncio
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
from pymongo.errors import DuplicateKeyError

from tasky.config import Config

SECRET_KEY = "test-secret-key-that-is-long-enough-for-hs256"
MONGODB_URI = "mongodb://localhost:27017/go-mongodb"


class FakeClock:
    """Controllable wall clock."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2026, 1, 1, 12, 0, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current += timedelta(**kwargs)


class FakeBackend:
    """In-memory document store shared by all fake clients of a test."""

    def __init__(self) -> None:
        self.collections: dict[str, list[dict[str, Any]]] = {}
        self.unique_fields: dict[str, set[str]] = {}
        self.delay = 0.0  # Seconds each round-trip holds a pool slot
        self.ping_error: Exception | None = None
        self.in_flight = 0
        self.max_in_flight = 0
        self.clients: list["FakeMongoClient"] = []


class FakeCollection:
    def __init__(self, client: "FakeMongoClient", name: str) -> None:
        self._client = client
        self._backend = client.backend
        self._name = name

    @property
    def _docs(self) -> list[dict[str, Any]]:
        return self._backend.collections.setdefault(self._name, [])

    def _matches(self, doc: dict[str, Any], query: dict[str, Any]) -> bool:
        return all(doc.get(key) == value for key, value in query.items())

    async def create_index(self, keys: list[tuple[str, int]], unique: bool = False) -> str:
        await self._client.round_trip()
        if unique:
            self._backend.unique_fields.setdefault(self._name, set()).update(key for key, _ in keys)
        return "_".join(f"{key}_{direction}" for key, direction in keys)

    async def insert_one(self, doc: dict[str, Any]) -> Any:
        await self._client.round_trip()
        for field in self._backend.unique_fields.get(self._name, set()):
            if any(existing.get(field) == doc.get(field) for existing in self._docs):
                raise DuplicateKeyError(f"E11000 duplicate key error collection: {self._name} index: {field}_1")
        self._docs.append(dict(doc))
        return doc["_id"]

    async def find_one(self, query: dict[str, Any]) -> dict[str, Any] | None:
        await self._client.round_trip()
        return next((dict(doc) for doc in self._docs if self._matches(doc, query)), None)

    async def count_documents(self, query: dict[str, Any], limit: int = 0) -> int:
        await self._client.round_trip()
        count = sum(1 for doc in self._docs if self._matches(doc, query))
        return min(count, limit) if limit else count


class FakeDatabase:
    def __init__(self, client: "FakeMongoClient", name: str) -> None:
        self._client = client
        self.name = name

    def get_collection(self, name: str) -> FakeCollection:
        return FakeCollection(self._client, name)


class FakeAdmin:
    def __init__(self, backend: FakeBackend) -> None:
        self._backend = backend

    async def command(self, name: str) -> dict[str, Any]:
        if self._backend.ping_error is not None:
            raise self._backend.ping_error
        return {"ok": 1.0}


class FakeMongoClient:
    def __init__(self, backend: FakeBackend, uri: str, **options: Any) -> None:
        self.backend = backend
        self.uri = uri
        self.options = options
        self.closed = False
        self.admin = FakeAdmin(backend)
        self._slots = asyncio.Semaphore(options["maxPoolSize"])

    def get_database(self, name: str) -> FakeDatabase:
        return FakeDatabase(self, name)

    async def round_trip(self) -> None:
        async with self._slots:
            self.backend.in_flight += 1
            self.backend.max_in_flight = max(self.backend.max_in_flight, self.backend.in_flight)
            try:
                await asyncio.sleep(self.backend.delay)
            finally:
                self.backend.in_flight -= 1

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def secret_key() -> str:
    return SECRET_KEY


@pytest.fixture
def make_config() -> Callable[..., Config]:
    """Build a Config without reading .env; bcrypt cost lowered for speed."""

    def _make(**overrides: Any) -> Config:
        values: dict[str, Any] = {"secret_key": SECRET_KEY, "mongodb_uri": MONGODB_URI, "bcrypt_rounds": 4}
        values.update(overrides)
        return Config(_env_file=None, **values)

    return _make


@pytest.fixture
def config(make_config):
    return make_config()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def client_factory(backend):
    """Client factory for ConnectionManager that records every client it creates."""

    def _factory(uri: str, **options: Any) -> FakeMongoClient:
        client = FakeMongoClient(backend, uri, **options)
        backend.clients.append(client)
        return client

    return _factory
