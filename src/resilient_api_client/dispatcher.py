# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Dispatcher: executes one logical API call with retries.

For every attempt the dispatcher runs the middleware pipeline to build the
outbound headers (credentials are read from the store at that moment, never
copied), sends the request and inspects the outcome:

- status < 400: the decoded payload is returned
- anything else: the retry controller decides between another attempt
  (after a computed delay) and giving up, in which case the error
  classifier produces the single typed error that is raised

Attempts of one call are strictly sequential and re-use the same
descriptor. The call can be suspended only while an attempt is in flight
and while waiting out a retry delay; both waits race the caller's
CancellationToken, and cancellation ends the call with no further attempts.

A terminal 401 triggers ``on_unauthorized`` before the error is raised. In
a composed client this invalidates the session on every sub-client.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, TypeVar

import httpx

from .classifier import classify_failure, failure_from_exception, failure_from_response
from .config import ClientConfig
from .credentials.store import CredentialStore
from .exceptions import RequestCancelledError, RequestFailedError
from .observability.collector import RequestMetricsCollector
from .pipeline import RequestMiddleware, build_pipeline, run_pipeline
from .retry import RetryController
from .types.cancellation import CancellationToken
from .types.failure import AttemptFailure
from .types.request import RequestDescriptor, ResponseType

logger = logging.getLogger(__name__)

T = TypeVar("T")

UNAUTHORIZED = 401

# Exceptions raised by httpx while building a request, before any I/O
_BUILD_ERRORS = (httpx.InvalidURL, TypeError, ValueError)


class Dispatcher:
    """
    Runs RequestDescriptors against an ``httpx.AsyncClient``.

    The HTTP client is injected and may be shared between dispatchers; the
    credential store belongs to the owning API client.

    Example:
        async with httpx.AsyncClient(base_url=config.base_url) as http:
            dispatcher = Dispatcher(http, CredentialStore(), config)
            users = await dispatcher.execute(RequestDescriptor("GET", "/admin/users"))
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        credentials: CredentialStore,
        config: ClientConfig | None = None,
        retry: RetryController | None = None,
        on_unauthorized: Callable[[], None] | None = None,
        metrics: RequestMetricsCollector | None = None,
        middleware: Sequence[RequestMiddleware] | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        on_activity: Callable[[], None] | None = None,
    ) -> None:
        """
        Initialize the dispatcher.

        Args:
            http_client: Transport used for every attempt
            credentials: Store read at the start of every attempt
            config: Client configuration (timeouts, default headers, retry policy)
            retry: Retry controller; built from ``config.retry`` when omitted
            on_unauthorized: Called after a terminal 401; defaults to clearing
                ``credentials``
            metrics: Optional metrics collector
            middleware: Full replacement for the built-in request pipeline
            sleep: Coroutine used to wait out retry delays
            on_activity: Called after every successful call, once the
                credential store has recorded the activity
        """
        self.config = config or ClientConfig()
        self.http_client = http_client
        self.credentials = credentials
        self.retry = retry or RetryController(self.config.retry)
        self.on_unauthorized = on_unauthorized or credentials.clear
        self.metrics = metrics
        self._sleep = sleep
        self.on_activity = on_activity
        self.pipeline: list[RequestMiddleware] = (
            list(middleware)
            if middleware is not None
            else build_pipeline(
                credentials,
                default_headers=self.config.headers,
                extra=self.config.middleware,
            )
        )

    async def execute(self, descriptor: RequestDescriptor) -> Any:
        """
        Execute a call, retrying transient failures.

        Returns:
            Decoded payload: parsed JSON, text, bytes, or None for empty bodies

        Raises:
            RequestFailedError: Exactly one typed error once retries are exhausted
                or the failure is not retryable
            RequestCancelledError: The caller's cancellation token fired
        """
        method = descriptor.method
        started = time.monotonic()
        attempt = 0

        try:
            while True:
                attempt += 1
                self._raise_if_cancelled(descriptor.cancellation, attempt)

                outcome = await self._attempt(descriptor, attempt)
                if not isinstance(outcome, AttemptFailure):
                    self.credentials.touch()
                    if self.on_activity is not None:
                        self.on_activity()
                    self._record_outcome(method, "success", started)
                    return outcome

                failure = outcome
                if self.retry.should_retry(attempt, failure):
                    delay = self.retry.delay_for(attempt)
                    logger.warning(
                        f"{method} {descriptor.path} attempt {attempt} failed "
                        f"({failure.status_code or failure.code or failure.message}), "
                        f"retrying in {delay:.2f}s"
                    )
                    self.retry.notify_retry(attempt, failure)
                    if self.metrics is not None:
                        self.metrics.record_retry(method)
                    await self._race(
                        self._sleep(delay), descriptor.cancellation, attempt
                    )
                    continue

                error = classify_failure(failure)
                if failure.status_code == UNAUTHORIZED:
                    self._handle_unauthorized(descriptor)
                raise error from failure.exception
        except RequestFailedError as e:
            self._record_outcome(method, "failure", started, e.error_code)
            raise
        except (RequestCancelledError, asyncio.CancelledError):
            self._record_outcome(method, "cancelled", started)
            raise

    # ==========================================================================
    # Single attempt
    # ==========================================================================

    async def _attempt(
        self, descriptor: RequestDescriptor, attempt: int
    ) -> Any | AttemptFailure:
        """Send one attempt; return the payload or an AttemptFailure."""
        try:
            request = self._build_request(descriptor, attempt)
        except _BUILD_ERRORS as e:
            logger.debug(f"Could not build {descriptor.method} {descriptor.path}: {e}")
            return failure_from_exception(e, attempt)

        if self.metrics is not None:
            self.metrics.record_attempt(descriptor.method)
        logger.debug(f"{descriptor.method} {request.url} attempt {attempt}")

        try:
            response = await self._race(
                self.http_client.send(request), descriptor.cancellation, attempt
            )
        except httpx.RequestError as e:
            return failure_from_exception(e, attempt)

        if response.status_code >= 400:
            return failure_from_response(response, attempt)
        return self._decode(response, descriptor.response_type)

    def _build_request(
        self, descriptor: RequestDescriptor, attempt: int
    ) -> httpx.Request:
        headers = run_pipeline(self.pipeline, descriptor, attempt)
        kwargs: dict[str, Any] = {}
        if descriptor.body is not None:
            kwargs["json"] = descriptor.body
        if descriptor.content is not None:
            kwargs["content"] = descriptor.content
        if descriptor.files is not None:
            kwargs["files"] = descriptor.files
        if descriptor.data is not None:
            kwargs["data"] = dict(descriptor.data)
        return self.http_client.build_request(
            descriptor.method,
            descriptor.path,
            params=descriptor.query_params,
            headers=headers,
            timeout=descriptor.timeout or self.config.timeout,
            **kwargs,
        )

    @staticmethod
    def _decode(response: httpx.Response, response_type: ResponseType) -> Any:
        if response_type is ResponseType.BYTES:
            return response.content
        if response_type is ResponseType.TEXT:
            return response.text
        if not response.content:
            return None
        if "json" in response.headers.get("content-type", ""):
            try:
                return response.json()
            except ValueError:
                logger.debug("Response declared JSON but did not parse, returning text")
        return response.text

    # ==========================================================================
    # Cancellation
    # ==========================================================================

    @staticmethod
    def _raise_if_cancelled(token: CancellationToken | None, attempt: int) -> None:
        if token is not None and token.cancelled:
            raise RequestCancelledError(
                f"Request cancelled: {token.reason}" if token.reason else "Request cancelled",
                attempt=attempt,
            )

    async def _race(
        self,
        awaitable: Awaitable[T],
        token: CancellationToken | None,
        attempt: int,
    ) -> T:
        """Await ``awaitable`` unless ``token`` fires first."""
        if token is None:
            return await awaitable

        if token.cancelled:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            self._raise_if_cancelled(token, attempt)
        work = asyncio.ensure_future(awaitable)
        watcher = asyncio.ensure_future(token.wait())
        try:
            await asyncio.wait({work, watcher}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (work, watcher):
                if not task.done():
                    task.cancel()
                    with contextlib.suppress(asyncio.CancelledError):
                        await task

        if work.cancelled():
            self._raise_if_cancelled(token, attempt)
        return work.result()

    # ==========================================================================
    # Side effects
    # ==========================================================================

    def _handle_unauthorized(self, descriptor: RequestDescriptor) -> None:
        logger.warning(
            f"{descriptor.method} {descriptor.path} rejected with 401, "
            f"invalidating session"
        )
        if self.metrics is not None:
            self.metrics.record_session_invalidation("unauthorized")
        self.on_unauthorized()

    def _record_outcome(
        self,
        method: str,
        outcome: str,
        started: float,
        error_code: str | None = None,
    ) -> None:
        if self.metrics is None:
            return
        self.metrics.record_outcome(
            method, outcome, time.monotonic() - started, error_code
        )



__all__ = ["Dispatcher"]
