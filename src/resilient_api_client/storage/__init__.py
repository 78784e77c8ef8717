# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Token storage backends for persisting sessions.

Available backends:
- BaseTokenStorage: Abstract base class defining the storage interface
- MemoryTokenStorage: In-process storage for single-instance use
- RedisTokenStorage: Redis-based storage shared across processes (requires redis extra)

Note: RedisTokenStorage is lazily imported to avoid requiring the redis
package when only using MemoryTokenStorage.
"""

from typing import TYPE_CHECKING, cast

from resilient_api_client.storage.base import (
    SESSION_KEY,
    BaseTokenStorage,
    HealthCheckResult,
)
from resilient_api_client.storage.memory import MemoryTokenStorage
from resilient_api_client.storage.models import StoredSession

if TYPE_CHECKING:
    from resilient_api_client.storage.redis import RedisTokenStorage

__all__ = [
    "SESSION_KEY",
    "BaseTokenStorage",
    "HealthCheckResult",
    "MemoryTokenStorage",
    # Redis storage (lazy loaded)
    "RedisTokenStorage",
    "StoredSession",
]


def __getattr__(name: str) -> type:
    """Lazy import for the optional redis storage."""
    if name == "RedisTokenStorage":
        try:
            from resilient_api_client.storage import redis as redis_module

            return cast(type, redis_module.RedisTokenStorage)
        except ImportError as e:  # pragma: no cover
            raise ImportError(  # pragma: no cover
                f"'{name}' requires the 'redis' extra. "
                "Install with: pip install resilient-api-client[redis]"
            ) from e
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
