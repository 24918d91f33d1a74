import asyncio
from typing import Any

import structlog
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import DuplicateKeyError

from tasky.core.core import Service
from tasky.core.modules.user.models import User
from tasky.core.modules.user.validators import validate_email, validate_password
from tasky.errors import AuthenticationError, NotFoundError, ValidationError

logger = structlog.get_logger(__name__)

INCORRECT_CREDENTIALS = "email or password is incorrect"


class UserService(Service):
    """Signup and login over the `user` collection.

    Every storage call runs under its own operation deadline.
    """

    COLLECTION = "user"

    @property
    def _collection(self) -> AsyncCollection[dict[str, Any]]:
        return self.connections.collection(self.COLLECTION)

    async def on_start(self) -> None:
        async with self.connections.operation():
            await self._collection.create_index([("email", 1)], unique=True)

    async def has_email(self, email: str) -> bool:
        async with self.connections.operation():
            count = await self._collection.count_documents({"email": email}, limit=1)
        return count > 0

    async def get_user_by_email(self, email: str) -> User:
        async with self.connections.operation():
            doc = await self._collection.find_one({"email": email})
        if doc is None:
            raise NotFoundError(f"User '{email}' not found")
        return User.model_validate(doc)

    async def create_user(self, email: str, password: str, name: str) -> User:
        """Create user with hashed password."""
        validate_email(email)
        validate_password(password)
        if not name.strip():
            raise ValidationError("Name is required")
        if await self.has_email(email):
            raise ValidationError("User with this email already exists!")

        # bcrypt at cost 14 takes about a second
        password_hash = await asyncio.to_thread(self.core.credentials.hash_password, password)
        user = User(email=email, password_hash=password_hash, name=name)
        try:
            async with self.connections.operation():
                await self._collection.insert_one(user.to_mongo())
        except DuplicateKeyError as e:
            raise ValidationError("User with this email already exists!") from e

        logger.info("user_signed_up", user_id=str(user.id))
        return user

    async def authenticate(self, email: str, password: str) -> User:
        """Return the user whose credentials match, or raise AuthenticationError."""
        try:
            user = await self.get_user_by_email(email)
        except NotFoundError as e:
            raise AuthenticationError(INCORRECT_CREDENTIALS) from e

        if not await asyncio.to_thread(self.core.credentials.verify_password, user.password_hash, password):
            raise AuthenticationError(INCORRECT_CREDENTIALS)
        return user
