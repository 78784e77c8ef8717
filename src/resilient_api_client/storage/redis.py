# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
RedisTokenStorage

Redis-backed token storage so that several processes (or restarts of one)
can share an authenticated session. Requires the ``redis`` extra.

Keys are namespaced as ``<namespace>:<key>``. Connection problems surface
as StorageConnectionError, any other Redis failure as StorageOperationError.
"""

import asyncio
import logging
import os
from collections.abc import Awaitable, Callable
from typing import Any

from redis.asyncio import Redis
from redis.exceptions import ConnectionError, RedisError, TimeoutError

from ..exceptions import StorageConnectionError, StorageOperationError
from .base import BaseTokenStorage, HealthCheckResult

logger = logging.getLogger(__name__)

DEFAULT_REDIS_URL = "redis://localhost:6379"


class RedisTokenStorage(BaseTokenStorage):
    """
    Token storage on a single Redis instance.

    Example:
        storage = RedisTokenStorage(namespace="admin-cli")
        client = ApiClient.create("https://api.example.com/api/v1", token_storage=storage)
        await client.restore_session()
    """

    def __init__(
        self,
        redis_url: str | None = None,
        redis_client: Any | None = None,
        namespace: str = "api_client",
        connect_timeout: float = 5.0,
    ) -> None:
        """
        Initialize Redis token storage.

        Args:
            redis_url: Redis connection URL. If not provided, falls back to REDIS_URL
                environment variable, then to "redis://localhost:6379".
            redis_client: Optional pre-configured ``redis.asyncio.Redis`` client
            namespace: Namespace prefix for keys
            connect_timeout: Seconds allowed for the initial PING

        Environment Variables:
            REDIS_URL: Default Redis connection URL when redis_url parameter is not provided.
        """
        super().__init__(namespace)
        self.redis_url = redis_url or os.environ.get("REDIS_URL") or DEFAULT_REDIS_URL
        self.connect_timeout = connect_timeout

        self._redis: Any | None = redis_client
        self._owned_redis = redis_client is None
        self._connected = redis_client is not None
        self._connection_lock = asyncio.Lock()

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    async def _ensure_connected(self) -> Any:
        """Create and verify the connection on first use."""
        if self._connected and self._redis is not None:
            return self._redis
        async with self._connection_lock:
            if self._connected and self._redis is not None:
                return self._redis
            if self._redis is None:
                self._redis = Redis.from_url(self.redis_url, decode_responses=True)
            try:
                await asyncio.wait_for(self._redis.ping(), timeout=self.connect_timeout)
            except (ConnectionError, TimeoutError, asyncio.TimeoutError, OSError) as e:
                logger.error(f"Cannot connect to Redis token storage: {e}")
                raise StorageConnectionError(
                    f"Cannot connect to Redis token storage: {e}"
                ) from e
            self._connected = True
            logger.debug(f"Connected to Redis token storage, namespace '{self.namespace}'")
            return self._redis

    async def _run(
        self, operation: str, coro_factory: Callable[[Any], Awaitable[Any]]
    ) -> Any:
        redis_client = await self._ensure_connected()
        try:
            return await coro_factory(redis_client)
        except (ConnectionError, TimeoutError) as e:
            self._connected = False
            logger.error(f"Redis {operation} failed, connection lost: {e}")
            raise StorageConnectionError(f"Redis {operation} failed: {e}") from e
        except RedisError as e:
            logger.error(f"Redis {operation} failed: {e}")
            raise StorageOperationError(f"Redis {operation} failed: {e}") from e

    async def get(self, key: str) -> str | None:
        value = await self._run("GET", lambda r: r.get(self._key(key)))
        if isinstance(value, bytes):
            return value.decode()
        return value

    async def set(self, key: str, value: str, ttl: float | None = None) -> None:
        # Redis PX takes whole milliseconds
        px = max(int(ttl * 1000), 1) if ttl is not None else None
        await self._run("SET", lambda r: r.set(self._key(key), value, px=px))

    async def delete(self, key: str) -> bool:
        removed = await self._run("DEL", lambda r: r.delete(self._key(key)))
        return bool(removed)

    async def clear(self) -> None:
        async def _clear(redis_client: Any) -> int:
            keys = [k async for k in redis_client.scan_iter(match=self._key("*"))]
            if not keys:
                return 0
            return int(await redis_client.delete(*keys))

        removed = await self._run("SCAN/DEL", _clear)
        logger.debug(f"Cleared {removed} keys from namespace '{self.namespace}'")

    async def health_check(self) -> HealthCheckResult:
        """Perform health check on the storage."""
        try:
            redis_client = await self._ensure_connected()
            check_key = self._key("health_check")
            await redis_client.set(check_key, "ok", ex=60)
            result = await redis_client.get(check_key)
            await redis_client.delete(check_key)
            if isinstance(result, bytes):
                result = result.decode()
            return HealthCheckResult(
                healthy=result == "ok",
                backend_type="redis",
                namespace=self.namespace,
                metadata={"redis_url": self.redis_url, "connected": self._connected},
            )
        except (StorageConnectionError, RedisError, OSError) as e:
            return HealthCheckResult(
                healthy=False,
                backend_type="redis",
                namespace=self.namespace,
                error=str(e),
            )

    async def close(self) -> None:
        """Close the connection if this storage created it."""
        if self._redis is not None and self._owned_redis:
            await self._redis.aclose()
            self._redis = None
        self._connected = False


__all__ = ["DEFAULT_REDIS_URL", "RedisTokenStorage"]
