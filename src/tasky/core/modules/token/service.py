"""Signed, expiring session tokens.

Tokens are HS256 JWTs carrying only the subject (`sub`) and the expiry
(`exp`). They are self-contained: nothing is stored server-side, so a token
stays usable until it expires. There is no revocation.
"""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import jwt

from tasky.core.modules.token.models import (
    Claims,
    IssuedToken,
    RefreshDecision,
    TokenFailure,
    TokenStatus,
    ValidationResult,
)
from tasky.errors import SigningError
from tasky.utils import now


class TokenService:
    """Issues, validates and decides refresh of session tokens."""

    ALGORITHM = "HS256"
    DEFAULT_TTL = timedelta(hours=2)
    DEFAULT_REFRESH_THRESHOLD = timedelta(seconds=30)

    def __init__(
        self,
        secret_key: str,
        ttl: timedelta = DEFAULT_TTL,
        refresh_threshold: timedelta = DEFAULT_REFRESH_THRESHOLD,
        clock: Callable[[], datetime] = now,
    ) -> None:
        if not secret_key:
            raise SigningError("Session signing key is empty")
        self._secret_key = secret_key
        self._ttl = ttl
        self._refresh_threshold = refresh_threshold
        self._clock = clock

    def issue(self, subject: str) -> IssuedToken:
        """Sign a new token for `subject` expiring one TTL from now."""
        # JWT expiry has whole-second resolution
        expires_at = (self._clock() + self._ttl).replace(microsecond=0)
        payload = {"sub": subject, "exp": int(expires_at.timestamp())}
        try:
            token = jwt.encode(payload, self._secret_key, algorithm=self.ALGORITHM)
        except (jwt.PyJWTError, TypeError, ValueError) as e:
            raise SigningError("Failed to sign session token") from e
        return IssuedToken(token=token, expires_at=expires_at)

    def validate(self, token: str | None) -> ValidationResult:
        """Check signature and expiry of a presented token.

        Absence (None or empty) is reported as ABSENT, not as a failure.
        """
        if not token:
            return ValidationResult(status=TokenStatus.ABSENT)

        try:
            claims = self._decode(token)
        except jwt.InvalidSignatureError:
            return ValidationResult(status=TokenStatus.INVALID, failure=TokenFailure.BAD_SIGNATURE)
        except (jwt.InvalidTokenError, TypeError, ValueError):
            return ValidationResult(status=TokenStatus.INVALID, failure=TokenFailure.MALFORMED)

        if self._clock() >= claims.expires_at:
            return ValidationResult(status=TokenStatus.INVALID, claims=claims, failure=TokenFailure.EXPIRED)
        return ValidationResult(status=TokenStatus.VALID, claims=claims)

    def decide_refresh(self, token: str | None) -> RefreshDecision:
        """Decide whether a login should issue a new token or keep the presented one.

        A missing token, one that fails decoding or signature checks, an
        expired one, or one with less than the refresh threshold of lifetime
        left all call for a new token. Rejecting bad credentials is the gate's
        job, not this decision's.
        """
        result = self.validate(token)
        if result.claims is None:
            return RefreshDecision(should_issue_new=True)

        remaining = result.claims.expires_at - self._clock()
        if remaining < self._refresh_threshold:
            return RefreshDecision(should_issue_new=True, current_expiry=result.claims.expires_at)
        return RefreshDecision(should_issue_new=False, current_expiry=result.claims.expires_at)

    def _decode(self, token: str) -> Claims:
        # Expiry is checked against our own clock, not PyJWT's
        payload = jwt.decode(
            token,
            self._secret_key,
            algorithms=[self.ALGORITHM],
            options={"verify_exp": False, "require": ["sub", "exp"]},
        )
        subject = payload["sub"]
        if not isinstance(subject, str) or not subject:
            raise ValueError("Token subject must be a non-empty string")
        return Claims(subject=subject, expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=UTC))
