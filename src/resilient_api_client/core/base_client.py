# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Base API client.

BaseApiClient owns exactly one CredentialStore and one Dispatcher and gives
subclasses a small set of protected verbs (``_get``, ``_post``, ...). Domain
sub-clients in ``resilient_api_client.resources`` are thin subclasses that
only map methods to paths.
"""

import logging
import time
from collections.abc import Callable, Mapping
from http.cookiejar import CookieJar, DefaultCookiePolicy
from typing import Any

import httpx
from typing_extensions import Self

from ..config import ClientConfig
from ..credentials.store import CredentialStore
from ..dispatcher import Dispatcher
from ..exceptions import ApiClientError
from ..observability.collector import RequestMetricsCollector
from ..retry import RetryController
from ..types.cancellation import CancellationToken
from ..types.request import RequestDescriptor, ResponseType

logger = logging.getLogger(__name__)

HEALTH_PATH = "/health"
DATABASE_HEALTH_PATH = "/health/database"


def build_http_client(config: ClientConfig) -> httpx.AsyncClient:
    """
    Create the shared transport for a config.

    With ``with_credentials`` off, cookies set by the server are discarded.
    """
    cookies: httpx.Cookies | None = None
    if not config.with_credentials:
        cookies = httpx.Cookies(CookieJar(policy=DefaultCookiePolicy(allowed_domains=[])))
    return httpx.AsyncClient(
        base_url=config.base_url,
        timeout=config.timeout,
        cookies=cookies,
    )


class BaseApiClient:
    """
    One Dispatcher-bearing API client.

    A client created without an ``http_client`` builds and owns one; close it
    with ``aclose()`` or use the client as an async context manager. An
    injected ``http_client`` is left open for its owner to close.

    Example:
        async with BaseApiClient(ClientConfig(base_url="https://api.example.com")) as api:
            api.set_api_key("key-123")
            healthy = await api.check_health()
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        credentials: CredentialStore | None = None,
        on_unauthorized: Callable[[], None] | None = None,
        metrics: RequestMetricsCollector | None = None,
        retry: RetryController | None = None,
        clock: Callable[[], float] = time.time,
        on_activity: Callable[[], None] | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            config: Client configuration, defaults to ``ClientConfig()``
            http_client: Shared transport; built from ``config`` when omitted
            credentials: Credential store; a fresh one is created when omitted
            on_unauthorized: Called after a terminal 401, defaults to
                ``clear_credentials``
            metrics: Optional metrics collector
            retry: Retry controller, built from ``config.retry`` when omitted
            clock: Epoch-seconds clock for a newly created credential store
            on_activity: Called after every successful request
        """
        self.config = config or ClientConfig()
        self._owns_http_client = http_client is None
        self.http_client = http_client or build_http_client(self.config)
        self.credentials = credentials or CredentialStore(
            session_duration=self.config.session_duration, clock=clock
        )
        self.metrics = metrics
        self.dispatcher = Dispatcher(
            self.http_client,
            self.credentials,
            self.config,
            retry=retry,
            on_unauthorized=on_unauthorized or self.clear_credentials,
            metrics=metrics,
            on_activity=on_activity,
        )

    # ==========================================================================
    # Credentials
    # ==========================================================================

    def set_access_token(self, token: str | None) -> None:
        self.credentials.set_access_token(token)

    def get_access_token(self) -> str | None:
        return self.credentials.get_access_token()

    def set_api_key(self, key: str | None) -> None:
        self.credentials.set_api_key(key)

    def get_api_key(self) -> str | None:
        return self.credentials.get_api_key()

    def clear_credentials(self) -> None:
        self.credentials.clear()

    def is_session_expired(self) -> bool:
        return self.credentials.is_session_expired()

    def remaining_session_time(self) -> float:
        return self.credentials.remaining_session_time()

    # ==========================================================================
    # Protected verbs
    # ==========================================================================

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
        content: bytes | str | None = None,
        files: Any = None,
        data: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        override_headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
        cancellation: CancellationToken | None = None,
        response_type: ResponseType = ResponseType.JSON,
    ) -> Any:
        descriptor = RequestDescriptor(
            method=method,
            path=path,
            params=params or {},
            headers=headers or {},
            override_headers=override_headers or {},
            body=json,
            content=content,
            files=files,
            data=data,
            timeout=timeout,
            cancellation=cancellation,
            response_type=response_type,
        )
        return await self.dispatcher.execute(descriptor)

    async def _get(self, path: str, **options: Any) -> Any:
        return await self._request("GET", path, **options)

    async def _post(self, path: str, json: Any = None, **options: Any) -> Any:
        return await self._request("POST", path, json=json, **options)

    async def _put(self, path: str, json: Any = None, **options: Any) -> Any:
        return await self._request("PUT", path, json=json, **options)

    async def _patch(self, path: str, json: Any = None, **options: Any) -> Any:
        return await self._request("PATCH", path, json=json, **options)

    async def _delete(self, path: str, **options: Any) -> Any:
        return await self._request("DELETE", path, **options)

    async def _upload(
        self,
        path: str,
        files: Any,
        data: Mapping[str, Any] | None = None,
        **options: Any,
    ) -> Any:
        """POST multipart form data, with the longer upload timeout by default."""
        options.setdefault("timeout", self.config.upload_timeout)
        return await self._request("POST", path, files=files, data=data, **options)

    async def _download(self, path: str, **options: Any) -> bytes:
        """GET a file as raw bytes, with the longer upload timeout by default."""
        options.setdefault("timeout", self.config.upload_timeout)
        options["response_type"] = ResponseType.BYTES
        result: bytes = await self._request("GET", path, **options)
        return result

    # ==========================================================================
    # Health
    # ==========================================================================

    async def check_health(self) -> bool:
        """Return True when the health endpoint answers successfully."""
        try:
            await self._get(HEALTH_PATH)
        except ApiClientError as e:
            logger.debug(f"Health check failed: {e}")
            return False
        return True

    async def check_database_health(self) -> Any:
        """Return the database health payload; errors propagate."""
        return await self._get(DATABASE_HEALTH_PATH)

    # ==========================================================================
    # Lifecycle
    # ==========================================================================

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http_client:
            await self.http_client.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        await self.aclose()


__all__ = ["BaseApiClient", "build_http_client"]
