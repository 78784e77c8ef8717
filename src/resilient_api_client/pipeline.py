# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Request middleware pipeline.

Outbound headers are assembled by an explicit, ordered list of middleware
run synchronously by the dispatcher before every attempt. The built-in
order fixes header precedence (later entries win):

1. DefaultHeaders: client-wide defaults from ClientConfig
2. CallerHeaders: ``descriptor.headers``
3. CredentialHeaders: ``Authorization`` / ``X-API-Key`` from the store
4. OverrideHeaders: ``descriptor.override_headers``
5. RequestTimestamp: ``X-Request-Time``

Caller headers therefore cannot replace credential headers unless passed as
explicit overrides. Idempotency keys are ordinary caller headers and pass
through untouched.
"""

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone

import httpx

from .credentials.store import CredentialStore
from .types.request import RequestDescriptor

REQUEST_TIME_HEADER = "X-Request-Time"
IDEMPOTENCY_HEADERS = ("Idempotency-Key", "X-Idempotency-Key")


@dataclass
class RequestContext:
    """
    Mutable per-attempt view handed to each middleware.

    Attributes:
        descriptor: The immutable call being executed
        attempt: 1-based attempt number
        headers: Outbound headers accumulated so far (case-insensitive)
    """

    descriptor: RequestDescriptor
    attempt: int
    headers: httpx.Headers


RequestMiddleware = Callable[[RequestContext], None]


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and ``Z``."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class DefaultHeaders:
    """Apply client-wide default headers."""

    def __init__(self, headers: Mapping[str, str] | None = None) -> None:
        self.headers = {"Accept": "application/json", **(headers or {})}

    def __call__(self, context: RequestContext) -> None:
        context.headers.update(self.headers)


class CallerHeaders:
    """Apply the descriptor's ordinary headers."""

    def __call__(self, context: RequestContext) -> None:
        context.headers.update(context.descriptor.headers)


class CredentialHeaders:
    """Apply credential headers read from the store at attempt time."""

    def __init__(self, store: CredentialStore) -> None:
        self.store = store

    def __call__(self, context: RequestContext) -> None:
        context.headers.update(self.store.credential_headers())


class OverrideHeaders:
    """Apply the descriptor's explicit overrides, beating credential headers."""

    def __call__(self, context: RequestContext) -> None:
        context.headers.update(context.descriptor.override_headers)


class RequestTimestamp:
    """Stamp every attempt with ``X-Request-Time``."""

    def __init__(self, clock: Callable[[], str] = utc_timestamp) -> None:
        self.clock = clock

    def __call__(self, context: RequestContext) -> None:
        context.headers[REQUEST_TIME_HEADER] = self.clock()


def build_pipeline(
    store: CredentialStore,
    default_headers: Mapping[str, str] | None = None,
    extra: Sequence[RequestMiddleware] = (),
    timestamp_clock: Callable[[], str] = utc_timestamp,
) -> list[RequestMiddleware]:
    """Assemble the built-in pipeline followed by any extra middleware."""
    pipeline: list[RequestMiddleware] = [
        DefaultHeaders(default_headers),
        CallerHeaders(),
        CredentialHeaders(store),
        OverrideHeaders(),
        RequestTimestamp(timestamp_clock),
    ]
    pipeline.extend(extra)
    return pipeline


def run_pipeline(
    pipeline: Sequence[RequestMiddleware],
    descriptor: RequestDescriptor,
    attempt: int,
) -> httpx.Headers:
    """Run every middleware in order and return the resulting headers."""
    context = RequestContext(
        descriptor=descriptor, attempt=attempt, headers=httpx.Headers()
    )
    for middleware in pipeline:
        middleware(context)
    return context.headers


__all__ = [
    "IDEMPOTENCY_HEADERS",
    "REQUEST_TIME_HEADER",
    "CallerHeaders",
    "CredentialHeaders",
    "DefaultHeaders",
    "OverrideHeaders",
    "RequestContext",
    "RequestMiddleware",
    "RequestTimestamp",
    "build_pipeline",
    "run_pipeline",
    "utc_timestamp",
]
