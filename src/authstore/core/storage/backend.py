"""Key-value backend interface and implementations.

The adapter talks to the store only through :class:`KeyValueBackend`. Redis is
the production backend; the in-memory backend mirrors its expiry semantics
for tests and single-process development.
"""

from __future__ import annotations

import fnmatch
import time
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any

from authstore.core.errors import BackendError


def to_timestamp(when: datetime) -> float:
    """Epoch seconds for ``when``; naive datetimes are taken as UTC."""
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return when.timestamp()


class KeyValueBackend(ABC):
    """Abstract interface for key-value backends."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Retrieve a value.

        Args:
            key: Backend key

        Returns:
            Stored value or None if absent/expired
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store a value, replacing any previous value and its expiry.

        Args:
            key: Backend key
            value: Serialized record
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete a value.

        Args:
            key: Backend key

        Returns:
            True if the key existed
        """
        pass

    @abstractmethod
    async def expire_at(self, key: str, when: datetime) -> bool:
        """Schedule removal of a key at an absolute instant.

        An instant in the past removes the key immediately.

        Args:
            key: Backend key
            when: Expiry instant

        Returns:
            True if the key existed and the expiry was set
        """
        pass

    @abstractmethod
    async def ping(self) -> bool:
        """Check that the backend is reachable."""
        pass


class InMemoryKeyValueBackend(KeyValueBackend):
    """In-memory backend with absolute expiry support."""

    def __init__(self):
        self._data: dict[str, dict[str, Any]] = {}

    def _live_entry(self, key: str) -> dict[str, Any] | None:
        entry = self._data.get(key)
        if entry is None:
            return None

        expires_at = entry["expires_at"]
        if expires_at is not None and time.time() >= expires_at:
            del self._data[key]
            return None

        return entry

    async def get(self, key: str) -> str | None:
        """Retrieve value from memory if not expired."""
        entry = self._live_entry(key)
        return entry["value"] if entry else None

    async def set(self, key: str, value: str) -> None:
        """Store value in memory; clears any expiry like Redis SET does."""
        self._data[key] = {"value": value, "expires_at": None}

    async def delete(self, key: str) -> bool:
        """Delete value from memory."""
        entry = self._live_entry(key)
        self._data.pop(key, None)
        return entry is not None

    async def expire_at(self, key: str, when: datetime) -> bool:
        """Set absolute expiry, evicting right away if already past."""
        entry = self._live_entry(key)
        if entry is None:
            return False

        expires_at = to_timestamp(when)
        if expires_at <= time.time():
            del self._data[key]
        else:
            entry["expires_at"] = expires_at
        return True

    async def ping(self) -> bool:
        """In-memory storage is always available."""
        return True

    async def cleanup_expired(self) -> int:
        """Remove expired values from memory."""
        now = time.time()
        expired_keys = [
            key
            for key, entry in self._data.items()
            if entry["expires_at"] is not None and now >= entry["expires_at"]
        ]

        for key in expired_keys:
            del self._data[key]

        return len(expired_keys)

    async def keys(self, pattern: str = "*") -> list[str]:
        """List live keys matching a glob pattern."""
        return [
            key
            for key in list(self._data)
            if fnmatch.fnmatchcase(key, pattern) and self._live_entry(key) is not None
        ]


class RedisKeyValueBackend(KeyValueBackend):
    """Redis-based backend.

    Every client failure is re-raised as :class:`BackendError`.
    """

    def __init__(self, redis_client):
        self._redis = redis_client
        self._available = True

    async def get(self, key: str) -> str | None:
        """Retrieve value from Redis."""
        try:
            data = await self._redis.get(key)
            self._available = True
        except Exception as e:
            self._available = False
            raise BackendError("get", key, str(e)) from e

        if data is None:
            return None

        # Decode if bytes
        if isinstance(data, bytes):
            data = data.decode("utf-8", errors="replace")

        return data

    async def set(self, key: str, value: str) -> None:
        """Store value in Redis."""
        try:
            await self._redis.set(key, value)
            self._available = True
        except Exception as e:
            self._available = False
            raise BackendError("set", key, str(e)) from e

    async def delete(self, key: str) -> bool:
        """Delete value from Redis."""
        try:
            deleted = await self._redis.delete(key)
            self._available = True
            return bool(deleted)
        except Exception as e:
            self._available = False
            raise BackendError("delete", key, str(e)) from e

    async def expire_at(self, key: str, when: datetime) -> bool:
        """Set absolute expiry with EXPIREAT."""
        try:
            result = await self._redis.expireat(key, int(to_timestamp(when)))
            self._available = True
            return bool(result)
        except Exception as e:
            self._available = False
            raise BackendError("expire_at", key, str(e)) from e

    async def ping(self) -> bool:
        """Test Redis connection health."""
        try:
            await self._redis.ping()
            self._available = True
            return True
        except Exception:
            self._available = False
            return False

    def is_available(self) -> bool:
        """Whether the last Redis call succeeded."""
        return self._available
