"""Application settings and configuration.

This module defines all configuration options for the JTI store.
Settings are loaded from environment variables with sensible defaults.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="JTI Store", alias="APP_NAME")

    # Database configuration
    database_url: str = Field(default="sqlite:///./jti_store.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")
    db_pool_pre_ping: bool = Field(default=True, alias="DB_POOL_PRE_PING")

    # Replay prevention policy. True means every JTI may be recorded once.
    prevent_token_reuse: bool = Field(default=True, alias="PREVENT_TOKEN_REUSE")
    # Engines outside the supported set fall back to update-then-insert when enabled.
    allow_default_dialect: bool = Field(default=True, alias="JTI_ALLOW_DEFAULT_DIALECT")
    purge_grace_seconds: int = Field(default=0, ge=0, alias="JTI_PURGE_GRACE_SECONDS")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: Literal["dev", "structured"] = Field(default="dev", alias="LOG_FORMAT")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides.

        Returns:
            The active database URL (test database if in testing mode, otherwise production)
        """
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url


settings = Settings()
