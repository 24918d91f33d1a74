"""Tests for signup and login account flows."""

import pytest
import pytest_asyncio

from tasky.core.core import Core
from tasky.errors import AuthenticationError, OperationTimeoutError, ValidationError


@pytest_asyncio.fixture
async def core(config, client_factory):
    core = Core(config, client_factory)
    await core.on_start()
    yield core
    await core.on_stop()


class TestCreateUser:
    @pytest.mark.asyncio
    async def test_password_stored_hashed(self, core, backend):
        user = await core.services.user.create_user("ann@example.com", "correct-horse", "Ann")

        (stored,) = backend.collections["user"]
        assert stored["_id"] == user.id
        assert stored["email"] == "ann@example.com"
        assert stored["name"] == "Ann"
        assert stored["password_hash"] != "correct-horse"
        assert core.credentials.verify_password(stored["password_hash"], "correct-horse")

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected(self, core):
        await core.services.user.create_user("ann@example.com", "correct-horse", "Ann")
        with pytest.raises(ValidationError, match="already exists"):
            await core.services.user.create_user("ann@example.com", "other-pass", "Ann Two")

    @pytest.mark.asyncio
    async def test_email_index_is_unique(self, core, backend):
        assert backend.unique_fields["user"] == {"email"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("email", "password", "name", "message"),
        [
            ("not-an-email", "correct-horse", "Ann", "Invalid email"),
            ("ann@example.com", "x", "Ann", "at least 2"),
            ("ann@example.com", "x" * 73, "Ann", "at most 72 bytes"),
            ("ann@example.com", "correct-horse", "  ", "Name is required"),
        ],
    )
    async def test_invalid_input_rejected(self, core, backend, email, password, name, message):
        with pytest.raises(ValidationError, match=message):
            await core.services.user.create_user(email, password, name)
        assert backend.collections.get("user", []) == []


class TestAuthenticate:
    @pytest.mark.asyncio
    async def test_correct_credentials(self, core):
        created = await core.services.user.create_user("ann@example.com", "correct-horse", "Ann")
        user = await core.services.user.authenticate("ann@example.com", "correct-horse")
        assert user.id == created.id

    @pytest.mark.asyncio
    async def test_wrong_password(self, core):
        await core.services.user.create_user("ann@example.com", "correct-horse", "Ann")
        with pytest.raises(AuthenticationError, match="email or password is incorrect"):
            await core.services.user.authenticate("ann@example.com", "wrong")

    @pytest.mark.asyncio
    async def test_unknown_email_looks_like_wrong_password(self, core):
        with pytest.raises(AuthenticationError, match="email or password is incorrect"):
            await core.services.user.authenticate("nobody@example.com", "correct-horse")

    @pytest.mark.asyncio
    async def test_slow_backend_surfaces_timeout(self, make_config, backend, client_factory):
        core = Core(make_config(operation_timeout=0.1), client_factory)
        await core.on_start()
        backend.delay = 5
        with pytest.raises(OperationTimeoutError):
            await core.services.user.authenticate("ann@example.com", "correct-horse")
        await core.on_stop()
