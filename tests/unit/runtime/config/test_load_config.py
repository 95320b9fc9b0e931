"""Tests for configuration loading with environment overrides."""

from pathlib import Path

from authstore.runtime.config import EnvironmentVariables, load_config
from authstore.runtime.config.config_data import ConfigData


def _env(**values) -> EnvironmentVariables:
    return EnvironmentVariables.model_validate(values)


def test_defaults_without_file(tmp_path):
    config = load_config(tmp_path / "missing.yaml", env=_env())

    assert config == ConfigData()
    assert config.keys.resolved("account") == "user:account:"
    assert config.adapter.error_policy == "suppress"
    assert config.adapter.date_decoding == "tagged"


def test_environment_overrides_file(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text(
        'config:\n  keys:\n    base: "file:"\n  redis:\n    url: redis://file:6379\n'
    )

    config = load_config(
        path,
        env=_env(
            REDIS_URL="redis://env:6379",
            REDIS_PASSWORD="pw",
            AUTHSTORE_KEY_PREFIX="env:",
            LOG_LEVEL="DEBUG",
            APP_ENVIRONMENT="test",
        ),
    )

    assert config.redis.url == "redis://env:6379"
    assert config.redis.connection_string == "redis://:pw@env:6379"
    assert config.keys.base == "env:"
    assert config.logging.level == "DEBUG"
    assert config.environment == "test"


def test_unset_environment_keeps_file_values(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text('config:\n  keys:\n    base: "file:"\n')

    config = load_config(path, env=_env())

    assert config.keys.base == "file:"


def test_empty_key_prefix_from_environment_is_applied(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text('config:\n  keys:\n    base: "file:"\n')

    config = load_config(path, env=EnvironmentVariables.model_construct(key_prefix=""))

    assert config.keys.base == ""
