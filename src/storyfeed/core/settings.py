"""Application settings and configuration.

This module defines all configuration options for the story feed service.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ASYNC_DRIVERS = ("+asyncpg", "+aiosqlite", "+aiomysql", "+asyncmy")


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Story Feed", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")

    # Security and authentication
    secret_key: str = Field(alias="SECRET_KEY")
    debug: bool = Field(default=False, alias="DEBUG")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 30,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # Database configuration
    database_url: str = Field(default="sqlite:///./storyfeed.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Feed pagination
    feed_default_limit: int = Field(default=10, alias="FEED_DEFAULT_LIMIT")
    feed_max_limit: int = Field(default=50, alias="FEED_MAX_LIMIT")
    # Append the story id as a final sort key so equal leading keys page deterministically.
    feed_stable_tiebreak: bool = Field(default=True, alias="FEED_STABLE_TIEBREAK")

    # Duplicate submission containment
    abuse_ban_threshold: int = Field(default=20, alias="ABUSE_BAN_THRESHOLD")

    # Story field limits
    story_content_max_length: int = Field(default=2000, alias="STORY_CONTENT_MAX_LENGTH")
    story_description_max_length: int = Field(
        default=500,
        alias="STORY_DESCRIPTION_MAX_LENGTH",
    )

    # Postcard rendering
    postcard_dir: str = Field(default="./postcards", alias="POSTCARD_DIR")
    postcard_url_prefix: str = Field(default="/postcards", alias="POSTCARD_URL_PREFIX")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @field_validator("database_url", "test_database_url")
    @classmethod
    def _require_sync_driver(cls, value: str | None) -> str | None:
        """Reject async driver URLs; the engine and Alembic are synchronous."""
        if value is not None and value.split("://", 1)[0].endswith(ASYNC_DRIVERS):
            raise ValueError(f"async database driver not supported: {value.split('://', 1)[0]}")
        return value

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url


settings = Settings()  # type: ignore[call-arg]
