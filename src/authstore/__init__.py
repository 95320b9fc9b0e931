"""Key-value persistence adapter for authentication frameworks."""

from authstore.core.adapter import AuthAdapter, KeyValueAdapter
from authstore.core.errors import AuthStoreError, BackendError, RecordDecodeError
from authstore.core.models import (
    AccountKey,
    AdapterAccount,
    AdapterSession,
    AdapterUser,
    SessionAndUser,
    SessionUpdate,
    UserUpdate,
    VerificationToken,
)
from authstore.core.storage import (
    InMemoryKeyValueBackend,
    KeyValueBackend,
    RedisKeyValueBackend,
)
from authstore.runtime.config.config_data import AdapterConfig, KeyPrefixConfig


def create_redis_adapter(
    client,
    keys: KeyPrefixConfig | None = None,
    options: AdapterConfig | None = None,
) -> KeyValueAdapter:
    """Wrap a ``redis.asyncio`` client into a ready-to-use adapter."""
    return KeyValueAdapter(RedisKeyValueBackend(client), keys=keys, options=options)


__all__ = [
    "AccountKey",
    "AdapterAccount",
    "AdapterConfig",
    "AdapterSession",
    "AdapterUser",
    "AuthAdapter",
    "AuthStoreError",
    "BackendError",
    "InMemoryKeyValueBackend",
    "KeyPrefixConfig",
    "KeyValueAdapter",
    "KeyValueBackend",
    "RecordDecodeError",
    "RedisKeyValueBackend",
    "SessionAndUser",
    "SessionUpdate",
    "UserUpdate",
    "VerificationToken",
    "create_redis_adapter",
]
