# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
ApiClient: composition root for every domain sub-client.

The root builds each sub-client explicitly, handing all of them the same
``httpx.AsyncClient``, config, retry controller and metrics collector, but
a separate CredentialStore. Sub-clients are kept in an ordered registry that
is fixed at construction.

Credential changes made on the root are broadcast to every registry member
in order. Broadcasting is best-effort: a member that fails does not stop the
others from being updated, and all failures are reported together afterwards
as a CredentialSyncError.

A terminal 401 on any member calls ``invalidate_session()`` on the root,
which clears the credentials of the root and of every member.
"""

from __future__ import annotations

import dataclasses
import logging
import random
import time
from collections.abc import Callable
from typing import Any

import httpx
from pydantic import ValidationError

from .config import ClientConfig
from .core.base_client import BaseApiClient
from .exceptions import ConfigurationError, CredentialSyncError, StorageOperationError
from .observability.collector import RequestMetricsCollector
from .resources import (
    AdminClients,
    AdminRateLimitClient,
    AdminUsersClient,
    ApiKeyClient,
    AuthClient,
    EntitiesClient,
    FileUploadClient,
    MfaClient,
    OAuthClient,
    SecuritySettingsClient,
    SessionClient,
    UserRateLimitClient,
)
from .retry import RetryController
from .storage.base import BaseTokenStorage
from .storage.models import StoredSession
from .types.credentials import CredentialPhase

logger = logging.getLogger(__name__)

_CONFIG_FIELDS = frozenset(f.name for f in dataclasses.fields(ClientConfig))


class ApiClient(BaseApiClient):
    """
    Main API client combining all domain sub-clients.

    Example:
        async with ApiClient.create("https://api.example.com/api/v1") as client:
            await client.auth.login({"email": "a@example.com", "password": "pw"})
            users = await client.admin.users.get_users({"page": 1})
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        metrics: RequestMetricsCollector | None = None,
        token_storage: BaseTokenStorage | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize the client and all sub-clients.

        Args:
            config: Shared client configuration
            http_client: Shared transport; built from ``config`` when omitted
            metrics: Metrics collector shared by all sub-clients
            token_storage: Optional storage for ``persist_session`` /
                ``restore_session``
            rng: Random source for retry jitter
            clock: Epoch-seconds clock for every credential store
        """
        config = config or ClientConfig()
        retry = RetryController(config.retry, rng=rng)
        super().__init__(
            config,
            http_client=http_client,
            on_unauthorized=self.invalidate_session,
            metrics=metrics,
            retry=retry,
            clock=clock,
        )
        self.token_storage = token_storage
        self._clock = clock

        shared: dict[str, Any] = {
            "http_client": self.http_client,
            "on_unauthorized": self.invalidate_session,
            "metrics": metrics,
            "retry": retry,
            "clock": clock,
            "on_activity": self.credentials.touch,
        }

        self.auth = AuthClient(
            self.config, on_access_token=self.set_access_token, **shared
        )
        self.mfa = MfaClient(self.config, **shared)
        self.oauth = OAuthClient(
            self.config, on_access_token=self.set_access_token, **shared
        )
        self.sessions = SessionClient(self.config, **shared)
        self.uploads = FileUploadClient(self.config, **shared)
        self.api_keys = ApiKeyClient(self.config, **shared)
        self.user_rate_limits = UserRateLimitClient(self.config, **shared)
        self.entities = EntitiesClient(self.config, **shared)
        self.admin = AdminClients(
            users=AdminUsersClient(self.config, **shared),
            rate_limits=AdminRateLimitClient(self.config, **shared),
            security=SecuritySettingsClient(self.config, **shared),
        )

        self._registry: tuple[tuple[str, BaseApiClient], ...] = (
            ("auth", self.auth),
            ("mfa", self.mfa),
            ("oauth", self.oauth),
            ("sessions", self.sessions),
            ("uploads", self.uploads),
            ("api_keys", self.api_keys),
            ("user_rate_limits", self.user_rate_limits),
            ("entities", self.entities),
            ("admin.users", self.admin.users),
            ("admin.rate_limits", self.admin.rate_limits),
            ("admin.security", self.admin.security),
        )

    @property
    def members(self) -> tuple[tuple[str, BaseApiClient], ...]:
        """Registered sub-clients as ``(name, client)`` pairs, in broadcast order."""
        return self._registry

    # ==========================================================================
    # Credential broadcast
    # ==========================================================================

    def _broadcast(self, action: str, apply: Callable[[BaseApiClient], None]) -> None:
        failures: list[tuple[str, BaseException]] = []
        for name, member in self._registry:
            try:
                apply(member)
            except Exception as e:
                logger.error(f"{action} failed on sub-client '{name}': {e}")
                failures.append((name, e))
        if failures:
            raise CredentialSyncError(failures)

    def set_access_token(self, token: str | None) -> None:
        """Set the token on the root, then on every sub-client."""
        super().set_access_token(token)
        self._broadcast("set_access_token", lambda m: m.set_access_token(token))
        logger.info(f"Access token {'set' if token else 'cleared'} on all sub-clients")

    def set_api_key(self, key: str | None) -> None:
        """Set the API key on the root, then on every sub-client."""
        super().set_api_key(key)
        self._broadcast("set_api_key", lambda m: m.set_api_key(key))
        logger.info(f"API key {'set' if key else 'cleared'} on all sub-clients")

    def clear_credentials(self) -> None:
        super().clear_credentials()
        self._broadcast("clear_credentials", lambda m: m.clear_credentials())

    def invalidate_session(self) -> None:
        """Clear credentials on the root and every sub-client."""
        logger.warning("Session invalidated, clearing credentials on all sub-clients")
        self.auth.refresh_token = None
        self.clear_credentials()

    def set_session_duration(self, seconds: float) -> None:
        """Change the session lifetime used for tokens set from now on."""
        self.credentials.session_duration = seconds
        self._broadcast(
            "set_session_duration",
            lambda m: setattr(m.credentials, "session_duration", seconds),
        )

    @property
    def state(self) -> CredentialPhase:
        """Authentication phase of the root, without triggering expiry cleanup."""
        if self.credentials.snapshot().access_token is None:
            return CredentialPhase.UNAUTHENTICATED
        if self.credentials.is_session_expired():
            return CredentialPhase.EXPIRED
        return CredentialPhase.AUTHENTICATED

    # ==========================================================================
    # Persistence
    # ==========================================================================

    def _require_storage(self) -> BaseTokenStorage:
        if self.token_storage is None:
            raise ConfigurationError("No token_storage configured on this client")
        return self.token_storage

    async def persist_session(self) -> None:
        """Write the root's current credentials to token storage."""
        storage = self._require_storage()
        try:
            session = StoredSession.from_state(
                self.credentials.snapshot(),
                refresh_token=self.auth.refresh_token,
                session_duration=self.credentials.session_duration,
                saved_at=self._clock(),
            )
        except ValidationError as e:
            raise StorageOperationError("Current credential state cannot be persisted") from e
        await storage.save_session(session)
        logger.info("Session persisted to token storage")

    async def restore_session(self) -> bool:
        """
        Load credentials from token storage and apply them everywhere.

        Returns:
            True if a live session was restored, False if none was stored or
            the stored one had expired (it is deleted in that case)
        """
        storage = self._require_storage()
        session = await storage.load_session()
        if session is None:
            return False
        if session.is_expired(self._clock()):
            logger.info("Stored session has expired, discarding it")
            await storage.delete_session()
            return False

        if session.session_duration is not None:
            self.set_session_duration(session.session_duration)
        state = session.to_state()
        self.credentials.restore(state)
        self._broadcast("restore", lambda m: m.credentials.restore(state))
        self.auth.refresh_token = session.refresh_token
        logger.info("Session restored from token storage")
        return True

    async def forget_session(self) -> None:
        """Remove the persisted session, leaving in-memory credentials alone."""
        await self._require_storage().delete_session()

    async def aclose(self) -> None:
        await super().aclose()
        if self.token_storage is not None:
            await self.token_storage.close()

    # ==========================================================================
    # Factories
    # ==========================================================================

    @classmethod
    def create(cls, base_url: str, **overrides: Any) -> ApiClient:
        """
        Build a client for ``base_url``.

        Keyword arguments naming a ClientConfig field configure the client;
        the rest (``http_client``, ``metrics``, ``token_storage``, ``rng``,
        ``clock``) are passed to the constructor.
        """
        config_overrides = {k: v for k, v in overrides.items() if k in _CONFIG_FIELDS}
        client_kwargs = {k: v for k, v in overrides.items() if k not in _CONFIG_FIELDS}
        config = ClientConfig(base_url=base_url, **config_overrides)
        return cls(config, **client_kwargs)

    @classmethod
    def from_env(cls, **overrides: Any) -> ApiClient:
        """Build a client from ``API_URL`` and related environment variables."""
        config_overrides = {k: v for k, v in overrides.items() if k in _CONFIG_FIELDS}
        client_kwargs = {k: v for k, v in overrides.items() if k not in _CONFIG_FIELDS}
        return cls(ClientConfig.from_env(**config_overrides), **client_kwargs)


__all__ = ["ApiClient"]
