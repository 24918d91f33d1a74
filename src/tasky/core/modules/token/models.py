"""Session token models."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class TokenStatus(StrEnum):
    ABSENT = "absent"
    INVALID = "invalid"
    VALID = "valid"


class TokenFailure(StrEnum):
    """Why a presented token was rejected."""

    MALFORMED = "malformed"
    BAD_SIGNATURE = "bad_signature"
    EXPIRED = "expired"


class Claims(BaseModel):
    """Verified contents of a session token."""

    model_config = ConfigDict(frozen=True)

    subject: str
    expires_at: datetime


class IssuedToken(BaseModel):
    model_config = ConfigDict(frozen=True)

    token: str
    expires_at: datetime


class ValidationResult(BaseModel):
    """Outcome of checking a presented token.

    `failure` is set only for INVALID results. `claims` is set for VALID
    results and for tokens whose signature verified but which have expired.
    """

    model_config = ConfigDict(frozen=True)

    status: TokenStatus
    claims: Claims | None = None
    failure: TokenFailure | None = None

    @property
    def is_valid(self) -> bool:
        return self.status == TokenStatus.VALID


class RefreshDecision(BaseModel):
    model_config = ConfigDict(frozen=True)

    should_issue_new: bool
    current_expiry: datetime | None = None
