"""Configuration loading."""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from .config_data import (
    AdapterConfig,
    ConfigData,
    KeyPrefixConfig,
    LoggingConfig,
    RedisConfig,
)
from .config_template import load_templated_yaml
from .settings import EnvironmentVariables

DEFAULT_CONFIG_PATH = Path("config.yaml")


def apply_environment(config: ConfigData, env: EnvironmentVariables) -> ConfigData:
    """Return a copy of ``config`` with values set in the environment applied."""
    updates = {}
    if env.environment:
        updates["environment"] = env.environment
    if env.log_level:
        updates["logging"] = config.logging.model_copy(update={"level": env.log_level})

    redis_updates = {}
    if env.redis_url:
        redis_updates["url"] = env.redis_url
    if env.redis_password:
        redis_updates["password"] = env.redis_password
    if redis_updates:
        updates["redis"] = config.redis.model_copy(update=redis_updates)

    if env.key_prefix is not None:
        updates["keys"] = config.keys.model_copy(update={"base": env.key_prefix})

    return config.model_copy(update=updates)


def load_config(
    path: Path | None = None, env: EnvironmentVariables | None = None
) -> ConfigData:
    """Load configuration from YAML (when present) and the environment.

    Args:
        path: YAML file; defaults to ``config.yaml`` in the working directory
        env: Environment values; read from the process environment if omitted
    """
    path = path or DEFAULT_CONFIG_PATH
    if path.exists():
        config = load_templated_yaml(path)
    else:
        logger.debug("No configuration file at {}, using defaults", path)
        config = ConfigData()

    return apply_environment(config, env or EnvironmentVariables())


__all__ = [
    "AdapterConfig",
    "ConfigData",
    "EnvironmentVariables",
    "KeyPrefixConfig",
    "LoggingConfig",
    "RedisConfig",
    "apply_environment",
    "load_config",
    "load_templated_yaml",
]
