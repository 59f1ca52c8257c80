"""
Application Configuration

Settings for the catalog server, read once from environment variables
(and a local ``.env`` file) by pydantic-settings and shared through
``get_settings()``.

Every consumer (database engine, token signing, rate limiter, GraphQL
router, subscription broadcaster) reads the same cached instance, so a
bad value fails at import time rather than in the middle of a request.

Usage:
    from library_api.config import get_settings

    settings = get_settings()
    print(settings.database_url)
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
ENVIRONMENTS = {"development", "staging", "production"}
GRAPHQL_IDES = {"graphiql", "apollo-sandbox", "none"}
OVERFLOW_POLICIES = {"drop_oldest", "disconnect"}

# Substrings that mark a secret copied from an example file
SECRET_PLACEHOLDERS = ("replace_with", "change-me", "your-secret", "generate-with")
MIN_SECRET_LENGTH = 32


def _choice(value: str, choices: set[str], field: str) -> str:
    """Case-insensitive membership check returning the canonical spelling."""
    for choice in choices:
        if value.lower() == choice.lower():
            return choice
    raise ValueError(f"{field} must be one of {sorted(choices)}")


class Settings(BaseSettings):
    """
    Server settings.

    Each field maps to the upper-case environment variable of the same
    name (``subscriber_queue_size`` -> ``SUBSCRIBER_QUEUE_SIZE``).
    """

    # -------------------------------------------------------------------------
    # Server
    # -------------------------------------------------------------------------
    app_name: str = Field(
        default="Library Catalog API",
        description="Name shown in the API docs and log lines"
    )
    debug: bool = Field(
        default=False,
        description="Echo SQL, reload on change, show error details"
    )
    host: str = Field(
        default="0.0.0.0",
        description="Interface uvicorn listens on"
    )
    port: int = Field(
        default=4000,
        description="Port uvicorn listens on"
    )
    environment: str = Field(
        default="development",
        description="Deployment stage: development, staging or production"
    )
    log_level: str = Field(
        default="INFO",
        description="Root logging level"
    )

    # -------------------------------------------------------------------------
    # Database
    # -------------------------------------------------------------------------
    database_url: str = Field(
        default="sqlite:///./library.db",
        description="SQLAlchemy URL of the catalog database"
    )
    db_pool_size: int = Field(
        default=5,
        description="Pooled connections kept open (server databases only)"
    )
    db_max_overflow: int = Field(
        default=10,
        description="Extra connections allowed above the pool size"
    )

    # -------------------------------------------------------------------------
    # Authentication
    # -------------------------------------------------------------------------
    secret_key: str = Field(
        default="REPLACE_WITH_YOUR_GENERATED_SECRET_KEY",
        description="HS256 key for signing bearer tokens (openssl rand -hex 32)"
    )
    access_token_expire_minutes: Optional[int] = Field(
        default=None,
        description="Token lifetime in minutes; tokens never expire when unset"
    )
    default_user_password: str = Field(
        default="secret",
        description="Password of users created without one"
    )
    allowed_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="Comma-separated CORS origins"
    )

    # -------------------------------------------------------------------------
    # Rate Limiting
    # -------------------------------------------------------------------------
    rate_limit_enabled: bool = Field(
        default=True,
        description="Apply the per-client request limit"
    )
    rate_limit_default: str = Field(
        default="100/minute",
        description="Request limit per client, in limits notation"
    )
    rate_limit_storage_uri: str = Field(
        default="memory://",
        description="Counter storage for the limiter"
    )

    # -------------------------------------------------------------------------
    # GraphQL and Subscriptions
    # -------------------------------------------------------------------------
    graphql_ide: str = Field(
        default="apollo-sandbox",
        description="Browser IDE served at /graphql: graphiql, apollo-sandbox or none"
    )
    subscriber_queue_size: int = Field(
        default=100,
        gt=0,
        description="Undelivered events buffered per subscriber"
    )
    subscriber_overflow_policy: str = Field(
        default="drop_oldest",
        description="Full subscriber queue: drop_oldest or disconnect"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------
    @property
    def allowed_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.allowed_origins.split(",")]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------
    @field_validator("secret_key")
    @classmethod
    def validate_secret_key(cls, v: str) -> str:
        """
        Refuse to start with an example or short signing key.

        Raises:
            ValueError: If the key looks like a placeholder or is too short
        """
        if any(marker in v.lower() for marker in SECRET_PLACEHOLDERS):
            raise ValueError(
                "SECRET_KEY contains a placeholder value. "
                "Generate a secure key with: openssl rand -hex 32"
            )

        if len(v) < MIN_SECRET_LENGTH:
            raise ValueError(
                f"SECRET_KEY must be at least {MIN_SECRET_LENGTH} characters long. "
                "Generate a secure key with: openssl rand -hex 32"
            )

        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        return _choice(v, LOG_LEVELS, "log_level")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        return _choice(v, ENVIRONMENTS, "environment")

    @field_validator("graphql_ide")
    @classmethod
    def validate_graphql_ide(cls, v: str) -> str:
        return _choice(v, GRAPHQL_IDES, "graphql_ide")

    @field_validator("subscriber_overflow_policy")
    @classmethod
    def validate_overflow_policy(cls, v: str) -> str:
        return _choice(v, OVERFLOW_POLICIES, "subscriber_overflow_policy")


@lru_cache
def get_settings() -> Settings:
    """
    Get the cached settings.

    The first call reads the environment and runs the validators; later
    calls return the same instance.
    """
    return Settings()
