from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentVariables(BaseSettings):
    """Simple primitive values loaded from environment variables and .env files."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Environment and deployment
    environment: Literal["development", "production", "test"] | None = Field(
        default=None, validation_alias="APP_ENVIRONMENT"
    )
    log_level: str | None = Field(default=None, validation_alias="LOG_LEVEL")

    # Infrastructure
    redis_url: str | None = Field(default=None, validation_alias="REDIS_URL")
    redis_password: str | None = Field(default=None, validation_alias="REDIS_PASSWORD")

    # Key namespace shared by every record kind
    key_prefix: str | None = Field(default=None, validation_alias="AUTHSTORE_KEY_PREFIX")
