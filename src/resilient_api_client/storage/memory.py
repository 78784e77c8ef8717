# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
MemoryTokenStorage

In-process token storage that doesn't require Redis. Suitable for tests,
scripts and single-process applications.
"""

import asyncio
import logging
import time
from collections.abc import Callable

from .base import BaseTokenStorage, HealthCheckResult

logger = logging.getLogger(__name__)


class MemoryTokenStorage(BaseTokenStorage):
    """
    Dict-backed token storage with TTL support.

    Key Features:
    - Pure in-memory storage, lost on process exit
    - Lazy expiration: expired entries are dropped when read
    - Async-safe operations using asyncio.Lock
    """

    def __init__(
        self,
        namespace: str = "api_client",
        clock: Callable[[], float] = time.time,
    ) -> None:
        super().__init__(namespace)
        self._clock = clock
        # Format: Dict[key, Tuple[value, Optional[expiry_timestamp]]]
        self._entries: dict[str, tuple[str, float | None]] = {}
        self._lock = asyncio.Lock()
        logger.debug(f"Initialized MemoryTokenStorage with namespace '{namespace}'")

    def _is_expired(self, expiry: float | None) -> bool:
        if expiry is None:
            return False
        return self._clock() > expiry

    async def get(self, key: str) -> str | None:
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expiry = entry
            if self._is_expired(expiry):
                del self._entries[key]
                return None
            return value

    async def set(self, key: str, value: str, ttl: float | None = None) -> None:
        expiry = self._clock() + ttl if ttl is not None else None
        async with self._lock:
            self._entries[key] = (value, expiry)

    async def delete(self, key: str) -> bool:
        async with self._lock:
            return self._entries.pop(key, None) is not None

    async def clear(self) -> None:
        async with self._lock:
            self._entries.clear()

    async def health_check(self) -> HealthCheckResult:
        async with self._lock:
            live = sum(
                1 for _, expiry in self._entries.values() if not self._is_expired(expiry)
            )
        return HealthCheckResult(
            healthy=True,
            backend_type="memory",
            namespace=self.namespace,
            metadata={"entries": live},
        )


__all__ = ["MemoryTokenStorage"]
