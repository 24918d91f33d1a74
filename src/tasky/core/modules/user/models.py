from uuid import UUID

from pydantic import BaseModel, Field

from tasky.core.db import MongoModel


class User(MongoModel):
    """Credential record. Created on signup, read on login."""

    email: str
    password_hash: str  # bcrypt hash
    name: str


class UserView(BaseModel):
    """User account information (API representation)."""

    id: UUID = Field(..., description="User ID")
    email: str = Field(..., description="Email address")
    name: str = Field(..., description="Display name")

    @classmethod
    def from_domain(cls, user: User) -> "UserView":
        """Create view model from domain model."""
        return cls(id=user.id, email=user.email, name=user.name)
