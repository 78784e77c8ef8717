# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Configuration for the resilient API client.

This module provides the client configuration consumed by the dispatcher
(base URL, timeout, cookie policy, default headers, session duration) and
the retry policy attached to every dispatcher at construction.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .exceptions import ConfigurationError

if TYPE_CHECKING:
    from .pipeline import RequestMiddleware
    from .types.failure import AttemptFailure

DEFAULT_BASE_URL = "http://localhost:3000/api/v1"
DEFAULT_SESSION_DURATION = 8 * 60 * 60.0


def default_retry_predicate(failure: AttemptFailure) -> bool:
    """
    Decide whether a failed attempt is transient.

    Retries when the request went out but no response came back, when the
    status is 5xx, or when it is exactly 429 or 408. Every other 4xx is
    terminal, and so is a request that could not be sent at all or whose
    response could not be decoded or followed.
    """
    if not failure.has_response:
        return failure.request_sent and not failure.is_protocol_error
    status = failure.status_code or 0
    if status >= 500:
        return True
    return status in (429, 408)


@dataclass
class RetryPolicy:
    """
    Retry and backoff settings attached to a dispatcher.

    Delays are in seconds. The delay before retry ``n`` is
    ``min(base_delay * 2 ** (n - 1), max_delay) + uniform(0, jitter_max)``.
    """

    max_retries: int = 3
    """Maximum number of retries after the first attempt."""

    base_delay: float = 1.0
    """Delay before the first retry, doubled for each subsequent retry."""

    max_delay: float = 30.0
    """Cap applied to the exponential part of the delay."""

    jitter_max: float = 1.0
    """Upper bound of the random jitter added to every delay."""

    retry_predicate: Callable[[AttemptFailure], bool] = default_retry_predicate
    """Decides whether a given failure is worth retrying."""

    on_retry: Callable[[int, AttemptFailure], None] | None = None
    """Called with (retry_number, failure) before each retry delay."""

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.max_retries < 0:
            raise ConfigurationError("max_retries must be >= 0")
        if self.base_delay < 0:
            raise ConfigurationError("base_delay must be >= 0")
        if self.max_delay < self.base_delay:
            raise ConfigurationError("max_delay must be >= base_delay")
        if self.jitter_max < 0:
            raise ConfigurationError("jitter_max must be >= 0")


@dataclass
class ClientConfig:
    """
    Configuration shared by every dispatcher of a composed client.
    """

    # === Connection ===

    base_url: str = DEFAULT_BASE_URL
    """Base URL every request path is resolved against."""

    timeout: float = 30.0
    """Default request timeout in seconds."""

    upload_timeout: float = 60.0
    """Default timeout for uploads and downloads in seconds."""

    with_credentials: bool = False
    """Keep and send cookies across requests (browser-style credentials)."""

    headers: dict[str, str] = field(default_factory=dict)
    """Extra default headers sent with every request."""

    # === Resilience ===

    retry: RetryPolicy = field(default_factory=RetryPolicy)
    """Retry policy for every dispatcher built from this config."""

    # === Session ===

    session_duration: float = DEFAULT_SESSION_DURATION
    """Lifetime of an access token in seconds, counted from when it was set."""

    # === Pipeline ===

    middleware: list[RequestMiddleware] = field(default_factory=list)
    """Extra request middleware appended after the built-in pipeline."""

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.base_url.startswith(("http://", "https://")):
            raise ConfigurationError(
                f"base_url must start with http:// or https://, got {self.base_url!r}"
            )
        self.base_url = self.base_url.rstrip("/")
        if self.timeout <= 0:
            raise ConfigurationError("timeout must be positive")
        if self.upload_timeout <= 0:
            raise ConfigurationError("upload_timeout must be positive")
        if self.session_duration <= 0:
            raise ConfigurationError("session_duration must be positive")

    @classmethod
    def from_env(cls, **overrides: object) -> ClientConfig:
        """
        Build a config from environment variables.

        Environment Variables:
            API_URL: Base URL (default ``http://localhost:3000/api/v1``).
            API_TIMEOUT: Request timeout in seconds.
            API_SESSION_DURATION: Session duration in seconds.
        """
        values: dict[str, object] = {
            "base_url": os.environ.get("API_URL") or DEFAULT_BASE_URL,
        }
        timeout = os.environ.get("API_TIMEOUT")
        if timeout:
            values["timeout"] = _parse_float("API_TIMEOUT", timeout)
        session_duration = os.environ.get("API_SESSION_DURATION")
        if session_duration:
            values["session_duration"] = _parse_float(
                "API_SESSION_DURATION", session_duration
            )
        values.update(overrides)
        return cls(**values)  # type: ignore[arg-type]


def _parse_float(name: str, raw: str) -> float:
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_SESSION_DURATION",
    "ClientConfig",
    "RetryPolicy",
    "default_retry_predicate",
]
