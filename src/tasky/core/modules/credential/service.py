import bcrypt
import structlog

from tasky.errors import HashingError

logger = structlog.get_logger(__name__)

MAX_PASSWORD_BYTES = 72  # bcrypt input limit


class CredentialService:
    """One-way password hashing with bcrypt."""

    DEFAULT_ROUNDS = 14

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        self._rounds = rounds

    def hash_password(self, password: str) -> str:
        """Hash a plaintext password.

        Raises:
            HashingError: If bcrypt refuses the input (e.g. longer than 72 bytes)
                or salt generation fails.
        """
        try:
            return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=self._rounds)).decode("utf-8")
        except (ValueError, OSError) as e:
            raise HashingError("Failed to hash password") from e

    def verify_password(self, password_hash: str, password: str) -> bool:
        """Check a plaintext password against a stored hash.

        A corrupt hash and a plaintext bcrypt cannot accept are both reported
        as a plain mismatch.
        """
        plaintext = password.encode("utf-8")
        if len(plaintext) > MAX_PASSWORD_BYTES:
            return False
        try:
            return bcrypt.checkpw(plaintext, password_hash.encode("utf-8"))
        except ValueError:
            logger.warning("password_hash_unreadable")
            return False
