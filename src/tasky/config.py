from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    secret_key: str  # Symmetric key for signing session tokens
    mongodb_uri: str
    database_name: str = "go-mongodb"
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 8080
    debug: bool = False
    cookie_secure: bool = False  # Set to True in production with HTTPS
    # Session tokens
    token_ttl: float = 2 * 60 * 60  # Seconds a freshly issued token stays valid
    refresh_threshold: float = 30  # Remaining lifetime (seconds) below which login issues a new token
    bcrypt_rounds: int = 14
    # Connection pool bounds, durations in seconds
    max_pool_size: int = 10
    min_pool_size: int = 2
    max_idle_time: float = 30
    server_selection_timeout: float = 5
    connect_timeout: float = 10
    socket_timeout: float = 10
    operation_timeout: float = 10  # Deadline for a single storage operation

    model_config = {
        "env_file": [".env"],
        "extra": "ignore",
        "frozen": True,
    }
