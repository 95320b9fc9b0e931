"""Redis connection service for managing Redis client lifecycle and health checks."""

from __future__ import annotations

from typing import Any

import redis.asyncio as redis_async
from loguru import logger
from redis.asyncio.retry import Retry
from redis.backoff import ExponentialBackoff

from authstore.core.adapter import KeyValueAdapter
from authstore.core.storage.backend import RedisKeyValueBackend
from authstore.runtime.config.config_data import (
    AdapterConfig,
    KeyPrefixConfig,
    RedisConfig,
)


class RedisService:
    """Owns a pooled Redis client and hands out adapters bound to it.

    The service is created explicitly and passed to whoever needs it; there
    is no process-wide client.
    """

    def __init__(self, config: RedisConfig, environment: str = "development"):
        """Initialize the Redis service with connection pooling."""
        self._config = config
        self._enabled = config.enabled
        self._client = None

        if not self._enabled:
            logger.info("Redis is disabled, service will not connect")
            return

        if not config.url:
            logger.warning("Redis URL not configured, service will not connect")
            self._enabled = False
            return

        try:
            logger.info(
                "Initializing Redis client with connection string: {}",
                config.sanitized_connection_string,
            )

            retry = Retry(ExponentialBackoff(base=1, cap=10), retries=6)

            self._client = redis_async.from_url(
                config.connection_string,
                encoding="utf-8",
                decode_responses=config.decode_responses,
                encoding_errors="replace",
                max_connections=config.max_connections,
                socket_timeout=config.socket_timeout,
                socket_connect_timeout=config.socket_connect_timeout,
                socket_keepalive=True,
                health_check_interval=30,
                retry=retry,
                client_name=config.client_name,
            )

            logger.info(
                "Redis client initialized",
                max_connections=config.max_connections,
                socket_timeout=config.socket_timeout,
            )
        except Exception as e:
            logger.error(
                "Failed to initialize Redis client",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            self._enabled = False
            self._client = None
            if environment == "production":
                raise

    def get_client(self):
        """Get the Redis async client instance.

        Returns:
            Redis async client if enabled and connected, None otherwise.
        """
        if not self._enabled or not self._client:
            logger.debug("Redis client not available, returning None")
            return None

        return self._client

    def create_adapter(
        self,
        keys: KeyPrefixConfig | None = None,
        options: AdapterConfig | None = None,
    ) -> KeyValueAdapter:
        """Build an adapter that stores records through this service's client.

        Raises:
            RuntimeError: If Redis is disabled or the client failed to initialize.
        """
        client = self.get_client()
        if client is None:
            raise RuntimeError("Redis client is not available")
        return KeyValueAdapter(RedisKeyValueBackend(client), keys=keys, options=options)

    async def health_check(self) -> bool:
        """Perform a health check on the Redis connection.

        Returns:
            True if Redis is healthy and reachable, False otherwise.
        """
        if not self._enabled or not self._client:
            logger.debug("Redis client not available, health check skipped")
            return False

        try:
            await self._client.ping()
            return True
        except Exception as e:
            logger.error(
                "Redis health check failed",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return False

    async def get_info(self) -> dict[str, Any] | None:
        """Get Redis server information for monitoring.

        Returns:
            Dictionary with Redis server info, or None if not available.
        """
        if not self._enabled or not self._client:
            return None

        try:
            info = await self._client.info()
            return {
                "version": info.get("redis_version"),
                "uptime_seconds": info.get("uptime_in_seconds"),
                "connected_clients": info.get("connected_clients"),
                "used_memory_human": info.get("used_memory_human"),
            }
        except Exception as e:
            logger.error(
                "Failed to get Redis info",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return None

    async def close(self) -> None:
        """Close the Redis connection and clean up resources."""
        if self._client:
            try:
                logger.info("Closing Redis connection")
                await self._client.aclose()
            except Exception as e:
                logger.error(
                    "Error closing Redis connection",
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
            finally:
                self._client = None

    @property
    def is_enabled(self) -> bool:
        """Check if Redis service is enabled."""
        return self._enabled
