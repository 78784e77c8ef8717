# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Resilient API Client - retrying, session-aware async client for the admin API.

This library wraps ``httpx`` with the request-execution core every endpoint
shares: credential handling, retries with exponential backoff and jitter,
typed error classification and session-wide invalidation on 401.

Key Features:
    - One composed ApiClient exposing auth, mfa, oauth, sessions, uploads,
      api_keys, user_rate_limits, entities and admin sub-clients
    - Credential broadcast from the root to every sub-client
    - Lazy session expiry (8 hours by default)
    - RFC 7807 Problem Detail bodies passed through verbatim
    - Caller-owned cancellation tokens and an explicit middleware pipeline
    - Optional session persistence (memory, Redis)

Quick Start:
    >>> from resilient_api_client import ApiClient
    >>>
    >>> async with ApiClient.create("https://api.example.com/api/v1") as client:
    ...     await client.auth.login({"email": "a@example.com", "password": "pw"})
    ...     entities = await client.entities.list_entities({"isActive": True})

Main Exports:
    - ApiClient, BaseApiClient: Client classes
    - ClientConfig, RetryPolicy: Configuration options
    - Dispatcher, RetryController, CredentialStore: Execution core
    - MemoryTokenStorage, RedisTokenStorage: Session persistence

Note: RedisTokenStorage requires the 'redis' extra. Install with:
    pip install resilient-api-client[redis]

Version: 1.0.0
"""

__version__ = "1.0.0"

from typing import TYPE_CHECKING

from .classifier import classify_failure
from .client import ApiClient
from .config import ClientConfig, RetryPolicy, default_retry_predicate
from .core import BaseApiClient
from .credentials import CredentialStore
from .dispatcher import Dispatcher
from .exceptions import (
    ApiClientError,
    ConfigurationError,
    CredentialSyncError,
    DatabaseHeuristicError,
    HttpError,
    NetworkError,
    ProblemDetailError,
    RequestCancelledError,
    RequestError,
    RequestFailedError,
    RequestTimeoutError,
    StorageConnectionError,
    StorageOperationError,
)
from .observability import RequestMetricsCollector
from .pipeline import RequestContext, RequestMiddleware
from .retry import RetryController
from .storage import BaseTokenStorage, MemoryTokenStorage, StoredSession
from .types import (
    AttemptFailure,
    CancellationToken,
    CredentialPhase,
    CredentialState,
    ProblemDetail,
    RequestDescriptor,
    ResponseType,
)

if TYPE_CHECKING:
    from .storage.redis import RedisTokenStorage

__all__ = [
    "ApiClient",
    "ApiClientError",
    "AttemptFailure",
    "BaseApiClient",
    "BaseTokenStorage",
    "CancellationToken",
    "ClientConfig",
    "ConfigurationError",
    "CredentialPhase",
    "CredentialState",
    "CredentialStore",
    "CredentialSyncError",
    "DatabaseHeuristicError",
    "Dispatcher",
    "HttpError",
    "MemoryTokenStorage",
    "NetworkError",
    "ProblemDetail",
    "ProblemDetailError",
    "RedisTokenStorage",
    "RequestCancelledError",
    "RequestContext",
    "RequestDescriptor",
    "RequestError",
    "RequestFailedError",
    "RequestMetricsCollector",
    "RequestMiddleware",
    "RequestTimeoutError",
    "ResponseType",
    "RetryController",
    "RetryPolicy",
    "StorageConnectionError",
    "StorageOperationError",
    "StoredSession",
    "__version__",
    "classify_failure",
    "default_retry_predicate",
]


def __getattr__(name: str) -> type:
    """Lazy import for the optional redis storage."""
    if name == "RedisTokenStorage":
        from .storage import RedisTokenStorage

        return RedisTokenStorage
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
