# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Base Token Storage

This module provides the BaseTokenStorage abstract class that defines the
interface for persisting credentials outside the client process.

Backends implement a small string key/value contract (get, set with TTL,
delete, clear, health check); session load/save is built on top of it here
so every backend serializes sessions the same way.
"""

import abc
import logging
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from ..exceptions import StorageOperationError
from .models import StoredSession

logger = logging.getLogger(__name__)

SESSION_KEY = "session"


@dataclass
class HealthCheckResult:
    """
    Structured health check result for storage monitoring.

    Attributes:
        healthy: Whether the storage is operational
        backend_type: Type of storage (e.g., 'redis', 'memory')
        namespace: Storage namespace
        error: Error message if unhealthy
        metadata: Additional backend-specific information
    """

    healthy: bool
    backend_type: str
    namespace: str
    error: str | None = None
    metadata: dict[str, Any] | None = None


class BaseTokenStorage(abc.ABC):
    """
    Abstract base class for credential persistence backends.

    Subclasses implement the key/value primitives. Keys passed to the
    primitives are unqualified; each backend applies its own namespace.
    """

    def __init__(self, namespace: str = "api_client") -> None:
        """
        Initialize the storage with a namespace for isolation.

        Args:
            namespace: Namespace for isolating data across different clients
        """
        self.namespace = namespace

    # ==========================================================================
    # Key/value primitives
    # ==========================================================================

    @abc.abstractmethod
    async def get(self, key: str) -> str | None:
        """
        Get the value stored under ``key``.

        Returns:
            The stored string, or None if missing or expired
        """

    @abc.abstractmethod
    async def set(self, key: str, value: str, ttl: float | None = None) -> None:
        """
        Store ``value`` under ``key``.

        Args:
            key: Unqualified key
            value: String payload
            ttl: Seconds until the entry expires, None for no expiry
        """

    @abc.abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete ``key``. Returns True if something was removed."""

    @abc.abstractmethod
    async def clear(self) -> None:
        """Remove every key in this storage's namespace."""

    @abc.abstractmethod
    async def health_check(self) -> HealthCheckResult:
        """Check that the backend is reachable and working."""

    async def close(self) -> None:  # noqa: B027
        """Release backend resources. No-op by default."""

    # ==========================================================================
    # Sessions
    # ==========================================================================

    async def save_session(
        self, session: StoredSession, key: str = SESSION_KEY
    ) -> None:
        """
        Persist a session, expiring it with the session deadline if it has one.
        """
        ttl: float | None = None
        if session.session_expires_at is not None:
            ttl = max(session.session_expires_at - session.saved_at, 1.0)
        await self.set(key, session.model_dump_json(), ttl=ttl)
        logger.debug(f"Saved session under '{self.namespace}:{key}'")

    async def load_session(self, key: str = SESSION_KEY) -> StoredSession | None:
        """
        Load a persisted session.

        Raises:
            StorageOperationError: If the stored payload is not a valid session
        """
        raw = await self.get(key)
        if raw is None:
            return None
        try:
            return StoredSession.model_validate_json(raw)
        except ValidationError as e:
            raise StorageOperationError(
                f"Stored session under '{self.namespace}:{key}' is invalid"
            ) from e

    async def delete_session(self, key: str = SESSION_KEY) -> bool:
        return await self.delete(key)


__all__ = ["SESSION_KEY", "BaseTokenStorage", "HealthCheckResult"]
