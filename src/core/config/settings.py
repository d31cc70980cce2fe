# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

This module provides centralized configuration management for the AdaptarIA API.
Settings are loaded from environment variables with sensible defaults.

The Settings class is the main entry point and aggregates all subsettings.
A singleton instance is provided via get_settings() for dependency injection.

Example:
    >>> from src.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> print(settings.environment)
    'development'
"""

from functools import lru_cache
from typing import Literal, Self

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database configuration.

    The service keeps every institute in one database; tenant scoping is
    applied by the domain services through the institute of each role record.

    Attributes:
        user: PostgreSQL username.
        password: PostgreSQL password.
        host: Database host address.
        port: Database port number.
        database: Database name.
        url_override: Full connection URL. When set, it wins over the components.
        pool_size: Connection pool size.
        max_overflow: Maximum overflow connections.
        auto_create_tables: Create missing tables at startup.
    """

    model_config = SettingsConfigDict(
        env_prefix="DATABASE_",
        extra="ignore",
    )

    user: str = "adaptaria"
    password: SecretStr = SecretStr("adaptaria_password")
    host: str = "localhost"
    port: int = 5432
    database: str = "adaptaria"
    url_override: str | None = Field(default=None, validation_alias="DATABASE_URL")
    pool_size: int = 10
    max_overflow: int = 20
    auto_create_tables: bool = False

    @property
    def url(self) -> str:
        """Build the async database URL from components."""
        if self.url_override:
            return self.url_override
        pwd = self.password.get_secret_value()
        return f"postgresql+asyncpg://{self.user}:{pwd}@{self.host}:{self.port}/{self.database}"

    @property
    def is_sqlite(self) -> bool:
        """Check if the configured backend is SQLite."""
        return self.url.startswith("sqlite")


class JWTSettings(BaseSettings):
    """JWT authentication configuration.

    Attributes:
        secret_key: Secret key for signing tokens.
        algorithm: JWT signing algorithm.
        access_token_expire_minutes: Session token lifetime (12 hours).
        password_set_expire_minutes: Lifetime of the link mailed on first login.
        password_recovery_expire_minutes: Lifetime of the password recovery link.
        cookie_name: Name of the httpOnly cookie carrying the session token.
        cookie_secure: Whether the cookie is flagged Secure.
    """

    model_config = SettingsConfigDict(
        env_prefix="JWT_",
        extra="ignore",
    )

    secret_key: SecretStr = SecretStr("change-this-in-production")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = Field(
        default=12 * 60,
        validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )
    password_set_expire_minutes: int = 24 * 60
    password_recovery_expire_minutes: int = 15
    cookie_name: str = "access_token"
    cookie_secure: bool = False


class RateLimitSettings(BaseSettings):
    """Rate limiting configuration.

    Attributes:
        max_requests: Maximum requests per client inside one window.
        window_minutes: Window length in minutes.
        storage_uri: slowapi storage backend.
    """

    model_config = SettingsConfigDict(
        env_prefix="RATE_LIMIT_",
        extra="ignore",
    )

    max_requests: int = 100
    window_minutes: int = 15
    storage_uri: str = "memory://"

    @property
    def default_limit(self) -> str:
        """Limit string understood by slowapi."""
        return f"{self.max_requests} per {self.window_minutes} minutes"


class CORSSettings(BaseSettings):
    """CORS configuration for API.

    Attributes:
        origins: Comma-separated list of allowed origins.
        allow_credentials: Whether to allow credentials.
        allow_methods: Allowed HTTP methods.
        allow_headers: Allowed HTTP headers.
    """

    model_config = SettingsConfigDict(
        env_prefix="CORS_",
        extra="ignore",
    )

    origins: str = "http://localhost:3000,http://localhost:5173"
    allow_credentials: bool = True
    allow_methods: list[str] = ["*"]
    allow_headers: list[str] = ["*"]

    @property
    def origins_list(self) -> list[str]:
        """Parse origins string into a list."""
        return [origin.strip() for origin in self.origins.split(",") if origin.strip()]


class SMTPSettings(BaseSettings):
    """Outgoing mail configuration.

    Attributes:
        host: SMTP server hostname. Mail is disabled when empty.
        port: SMTP server port.
        username: SMTP authentication username.
        password: SMTP authentication password.
        use_tls: Use STARTTLS.
        sender: Sender address.
        sender_name: Sender display name.
        timeout: Connection timeout in seconds.
    """

    model_config = SettingsConfigDict(
        env_prefix="SMTP_",
        extra="ignore",
    )

    host: str | None = None
    port: int = 587
    username: str | None = None
    password: SecretStr | None = None
    use_tls: bool = True
    sender: str = "no-reply@adaptaria.local"
    sender_name: str = "AdaptarIA"
    timeout: float = 5.0

    @property
    def is_configured(self) -> bool:
        """Check if enough is set to talk to a server."""
        return bool(self.host)


class SchedulerSettings(BaseSettings):
    """Periodic job configuration.

    Attributes:
        enabled: Whether the scheduler starts with the API.
        visibility_interval_seconds: Interval of the content publication job.
    """

    model_config = SettingsConfigDict(
        env_prefix="SCHEDULER_",
        extra="ignore",
    )

    enabled: bool = True
    visibility_interval_seconds: int = 60


class SurveySettings(BaseSettings):
    """Satisfaction survey configuration.

    Attributes:
        interval_minutes: Delay before a user is asked to answer again.
    """

    model_config = SettingsConfigDict(
        env_prefix="SURVEY_",
        extra="ignore",
    )

    interval_minutes: int = 1


class APISettings(BaseSettings):
    """API server configuration.

    Attributes:
        host: Host to bind to.
        port: Port to listen on.
        workers: Number of worker processes.
        reload: Whether to enable auto-reload.
        public_url: Base URL used in links sent by email.
    """

    model_config = SettingsConfigDict(
        env_prefix="API_",
        extra="ignore",
    )

    host: str = "0.0.0.0"
    port: int = 8080
    workers: int = 2
    reload: bool = False
    public_url: str = "http://localhost:8080"


class AdminSeedSettings(BaseSettings):
    """First administrator created when the database has none.

    Attributes:
        email: Admin email. Seeding is skipped when empty.
        password: Admin password.
        first_name: Admin first name.
        last_name: Admin last name.
    """

    model_config = SettingsConfigDict(
        env_prefix="ADMIN_",
        extra="ignore",
    )

    email: str | None = None
    password: SecretStr | None = None
    first_name: str = "Admin"
    last_name: str = "AdaptarIA"


class Settings(BaseSettings):
    """Main application settings aggregating all subsettings.

    Use get_settings() to obtain a cached singleton instance.

    Attributes:
        environment: Current environment.
        debug: Enable debug mode.
        log_level: Logging level.
        database: Database settings.
        jwt: JWT authentication settings.
        rate_limit: Rate limiting settings.
        cors: CORS settings.
        smtp: Mail settings.
        scheduler: Periodic job settings.
        survey: Survey settings.
        api: API server settings.
        admin: First admin seed settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Environment
    environment: Literal["development", "test", "staging", "production"] = "development"
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "DEBUG"

    # Subsettings - loaded with their own env prefixes
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    jwt: JWTSettings = Field(default_factory=JWTSettings)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)
    smtp: SMTPSettings = Field(default_factory=SMTPSettings)
    scheduler: SchedulerSettings = Field(default_factory=SchedulerSettings)
    survey: SurveySettings = Field(default_factory=SurveySettings)
    api: APISettings = Field(default_factory=APISettings)
    admin: AdminSeedSettings = Field(default_factory=AdminSeedSettings)

    @model_validator(mode="after")
    def validate_production_settings(self) -> Self:
        """Validate that production settings are properly configured.

        Raises:
            ValueError: If running in production with insecure defaults.
        """
        if self.environment == "production":
            default_jwt_secret = "change-this-in-production"
            if self.jwt.secret_key.get_secret_value() == default_jwt_secret:
                raise ValueError(
                    "JWT secret key must be changed from default in production. "
                    "Set JWT_SECRET_KEY environment variable."
                )
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_test(self) -> bool:
        """Check if running in the test environment."""
        return self.environment == "test"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call clear_settings_cache() if you need to reload settings.

    Returns:
        Cached Settings instance.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Call this if you need to reload settings from environment.
    Useful for testing or dynamic configuration updates.
    """
    get_settings.cache_clear()
