"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, computed_field


class KeyPrefixConfig(BaseModel):
    """Key namespace configuration.

    ``base`` is prepended to every per-kind prefix, so two deployments sharing
    one store only need distinct base prefixes.
    """

    base: str = Field(default="", description="Prefix prepended to every key")
    user: str = Field(default="user:", description="Prefix for user records")
    email: str = Field(default="user:email:", description="Prefix for the email index")
    account: str = Field(default="user:account:", description="Prefix for accounts")
    session: str = Field(default="user:session:", description="Prefix for sessions")
    verification_token: str = Field(
        default="user:token:", description="Prefix for verification tokens"
    )

    def resolved(self, kind: str) -> str:
        """Return the full prefix for a record kind, base included."""
        return self.base + getattr(self, kind)


class AdapterConfig(BaseModel):
    """Behaviour of the key-value adapter."""

    error_policy: Literal["suppress", "raise"] = Field(
        default="suppress",
        description="'suppress' maps backend failures to not-found; 'raise' propagates them",
    )
    date_decoding: Literal["tagged", "heuristic"] = Field(
        default="tagged",
        description="'heuristic' also turns ISO-8601 looking strings into datetimes",
    )


class RedisConfig(BaseModel):
    """Redis configuration model."""

    enabled: bool = Field(default=True, description="Enable Redis service")
    url: str = Field(default="", description="Redis connection URL")
    password: str | None = Field(
        default=None, description="Password for Redis authentication"
    )
    decode_responses: bool = Field(
        default=True, description="Decode Redis responses to strings"
    )
    max_connections: int = Field(default=20, description="Connection pool size")
    socket_timeout: float = Field(default=5.0, description="Socket timeout in seconds")
    socket_connect_timeout: float = Field(
        default=5.0, description="Connect timeout in seconds"
    )
    client_name: str = Field(
        default="authstore", description="Name reported by CLIENT LIST"
    )

    @computed_field
    @property
    def connection_string(self) -> str:
        """Construct the Redis connection string with password if provided."""
        if self.password:
            if "@" in self.url:
                # URL already has auth info
                return self.url
            parts = self.url.split("://", 1)
            if len(parts) == 2:
                scheme, rest = parts
                return f"{scheme}://:{self.password}@{rest}"
        return self.url

    @property
    def sanitized_connection_string(self) -> str:
        """Connection string with any password masked, safe for logs."""
        connection_string = self.connection_string
        if "@" not in connection_string or "://" not in connection_string:
            return connection_string
        scheme, rest = connection_string.split("://", 1)
        auth, host = rest.rsplit("@", 1)
        user = auth.split(":", 1)[0]
        return f"{scheme}://{user}:***@{host}"


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="plain", description="Log format")
    file: str | None = Field(default=None, description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Deployment environment"
    )
    keys: KeyPrefixConfig = Field(
        default_factory=KeyPrefixConfig, description="Key namespace configuration"
    )
    adapter: AdapterConfig = Field(
        default_factory=AdapterConfig, description="Adapter behaviour"
    )
    redis: RedisConfig = Field(
        default_factory=RedisConfig, description="Redis configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
