"""Application settings and configuration.

This module defines all configuration options for the QuillPress application.
Settings are loaded from environment variables (or a `.env` file). Secrets and
connection details have no defaults: a missing value fails at import time.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files and
    are treated as read-only once the process has started.
    """

    # Application metadata
    app_name: str = Field(default="QuillPress", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    app_env: str = Field(default="development", alias="APP_ENV")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Security and authentication
    secret_key: str = Field(alias="SECRET_KEY", min_length=1)
    bcrypt_rounds: int = Field(default=10, ge=4, le=31, alias="BCRYPT_ROUNDS")

    # Database configuration
    database_url: str = Field(alias="DATABASE_URL", min_length=1)
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Session token settings
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_seconds: int = Field(
        default=3600,
        alias="ACCESS_TOKEN_EXPIRE_SECONDS",
    )
    session_cookie_name: str = Field(default="token", alias="SESSION_COOKIE_NAME")
    token_header_name: str = Field(default="x-auth-token", alias="TOKEN_HEADER_NAME")

    # Profiles
    recent_posts_limit: int = Field(default=10, alias="RECENT_POSTS_LIMIT")

    # Editor autosave cadence (client side)
    autosave_idle_seconds: float = Field(default=5.0, alias="AUTOSAVE_IDLE_SECONDS")
    autosave_interval_seconds: float = Field(default=30.0, alias="AUTOSAVE_INTERVAL_SECONDS")

    # CORS configuration for the web frontend
    frontend_url: str = Field(alias="FRONTEND_URL", min_length=1)
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["Content-Type", "x-auth-token"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        """Return True when running with production semantics."""
        return self.app_env.lower() == "production"

    @property
    def cors_origins(self) -> list[str]:
        """Return the allowed origins for cross-origin requests."""
        return [origin.strip() for origin in self.frontend_url.split(",") if origin.strip()]

    @property
    def database_url_sync(self) -> str:
        """Return a sync-compatible database URL for tooling such as Alembic."""
        url = self.database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url


settings = Settings()  # type: ignore[call-arg]
