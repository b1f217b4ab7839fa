"""Application settings and configuration.

This module defines all configuration options for the Confession Wall service.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CATEGORIES = ["love", "college", "mental", "funny", "secrets"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files, or
    passed explicitly by field name when building an app for tests.
    """

    # Application metadata
    app_name: str = Field(default="Confession Wall", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./confessions.db", alias="DATABASE_URL")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")
    # Create missing tables at startup without Alembic; for throwaway databases
    auto_create_tables: bool = Field(default=False, alias="AUTO_CREATE_TABLES")

    # Moderation access; admin routes stay closed while this is unset
    admin_token: str | None = Field(default=None, alias="ADMIN_TOKEN")

    # Supabase mirror (optional, best-effort)
    supabase_url: str | None = Field(default=None, alias="SUPABASE_URL")
    supabase_anon_key: str | None = Field(default=None, alias="SUPABASE_ANON_KEY")
    supabase_table: str = Field(default="confessions", alias="SUPABASE_TABLE")
    mirror_timeout_seconds: float = Field(default=5.0, gt=0, alias="MIRROR_TIMEOUT_SECONDS")

    # Content policy
    allowed_categories: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CATEGORIES),
        alias="ALLOWED_CATEGORIES",
    )
    confession_max_length: int = Field(default=2000, gt=0, alias="CONFESSION_MAX_LENGTH")
    comment_max_length: int = Field(default=1000, gt=0, alias="COMMENT_MAX_LENGTH")
    nickname_max_length: int = Field(default=50, gt=0, alias="NICKNAME_MAX_LENGTH")

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
        populate_by_name=True,
        extra="ignore",
    )

    @property
    def mirror_enabled(self) -> bool:
        """Return True when both Supabase credentials are present."""
        return bool(self.supabase_url and self.supabase_anon_key)


settings = Settings()
