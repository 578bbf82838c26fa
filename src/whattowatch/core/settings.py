"""Application settings and configuration.

This module defines all configuration options for the whattowatch service.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="WhatToWatch", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./whattowatch.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")
    auto_create_tables: bool = Field(default=False, alias="AUTO_CREATE_TABLES")

    # Catalog provider (TMDb) integration
    tmdb_base_url: str = Field(default="https://api.themoviedb.org/3", alias="TMDB_BASE_URL")
    tmdb_access_token: str = Field(default="", alias="TMDB_ACCESS_TOKEN")
    tmdb_image_base_url: str = Field(
        default="https://image.tmdb.org/t/p",
        alias="TMDB_IMAGE_BASE_URL",
    )
    tmdb_http_timeout_seconds: float = Field(default=10.0, alias="TMDB_HTTP_TIMEOUT_SECONDS")
    watch_region: str = Field(default="US", alias="WATCH_REGION")

    # Discovery and group views
    discover_min_vote_count: int = Field(default=50, alias="DISCOVER_MIN_VOTE_COUNT")
    family_liked_page_size: int = Field(default=20, alias="FAMILY_LIKED_PAGE_SIZE")
    tonight_window_hours: float = Field(default=12.0, alias="TONIGHT_WINDOW_HOURS")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def database_url_sync(self) -> str:
        """Return the database URL Alembic connects with.

        The engine is synchronous already, so this is the effective URL as
        configured. Postgres deployments name their own driver in the URL and
        install it alongside the package.
        """
        return self.effective_database_url

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url


settings = Settings()
