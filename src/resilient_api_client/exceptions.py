# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Exception classes for the resilient API client.

This module defines the exception hierarchy used throughout the library.
All exceptions inherit from ApiClientError, making it easy to catch every
client-originated failure with a single except clause.

Failed HTTP calls surface as exactly one of the typed request errors:

- NetworkError: the server could not be reached at all
- RequestTimeoutError: the attempt was aborted by its timeout
- DatabaseHeuristicError: connection-level failure whose message hints at a
  database or connection problem (substring heuristic only)
- ProblemDetailError: the server answered with an RFC 7807 Problem Detail
- HttpError: the server answered with any other error status
- RequestError: anything else (no response, or the request never left)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .types.problem import ProblemDetail


class ApiClientError(Exception):
    """Base exception for all API client errors.

    Example:
        try:
            await client.entities.list_entities()
        except ApiClientError as e:
            logger.error(f"API call failed: {e}")
    """

    pass


class RequestFailedError(ApiClientError):
    """Base class for the typed errors produced by the error classifier.

    Attributes:
        message: Human readable description.
        status_code: HTTP status of the response, 0 when no response exists.
        error_code: Stable machine readable code for the failure.
    """

    default_error_code: str = "REQUEST_ERROR"

    def __init__(
        self,
        message: str,
        status_code: int = 0,
        error_code: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code or self.default_error_code

    def to_dict(self) -> dict[str, Any]:
        """Return the error in the ``{statusCode, message, error}`` wire shape."""
        return {
            "statusCode": self.status_code,
            "message": self.message,
            "error": self.error_code,
        }


class NetworkError(RequestFailedError):
    """Raised when the server is unreachable (DNS failure, refused connection)."""

    default_error_code = "NETWORK_ERROR"


class RequestTimeoutError(RequestFailedError):
    """Raised when an attempt was aborted because its timeout elapsed."""

    default_error_code = "TIMEOUT_ERROR"


class DatabaseHeuristicError(RequestFailedError):
    """Raised when a response-less failure mentions a database or connection.

    This is a substring heuristic on the failure message. It carries no
    authoritative signal and is kept for parity with existing callers only.
    """

    default_error_code = "DATABASE_ERROR"


class RequestError(RequestFailedError):
    """Raised for any failure that fits none of the other categories.

    Covers both "request sent, nothing came back" (``CONNECTION_ERROR``) and
    "request could not be sent" (``REQUEST_ERROR``).
    """

    default_error_code = "REQUEST_ERROR"


class HttpError(RequestFailedError):
    """Raised when the server responded with a non-Problem-Detail error status.

    Attributes:
        details: Optional structured details from the error body
            (``details`` or ``errors``).
        body: The decoded error body, when one was available.

    Example:
        try:
            await client.admin.users.get_user_by_id("missing")
        except HttpError as e:
            if e.status_code == 404:
                ...
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        error_code: str | None = None,
        details: Any = None,
        body: Any = None,
    ):
        super().__init__(message, status_code=status_code, error_code=error_code)
        self.details = details
        self.body = body

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.details is not None:
            data["details"] = self.details
        return data


class ProblemDetailError(RequestFailedError):
    """Raised when the server responded with an RFC 7807 Problem Detail.

    The body is passed through verbatim; ``problem.body`` is the exact
    mapping the server sent.

    Attributes:
        problem: The ProblemDetail wrapping the server body.
    """

    default_error_code = "PROBLEM_DETAIL"

    def __init__(self, problem: ProblemDetail):
        super().__init__(
            problem.detail or problem.title,
            status_code=problem.status,
        )
        self.problem = problem

    def to_dict(self) -> dict[str, Any]:
        return dict(self.problem.body)


class RequestCancelledError(ApiClientError):
    """Raised when the caller cancelled a request through its cancellation token.

    Cancellation is caller-initiated, so it is not one of the classified
    request failures and is never retried.
    """

    def __init__(self, message: str = "Request cancelled", attempt: int = 0):
        super().__init__(message)
        self.attempt = attempt


class ConfigurationError(ApiClientError):
    """Raised when client or retry configuration is invalid.

    Common causes include:
    - Negative retry counts or delays
    - A base URL without a scheme
    - A non-positive session duration
    """

    pass


class CredentialSyncError(ApiClientError):
    """Raised when a credential broadcast failed on one or more sub-clients.

    The broadcast is best-effort: every registered sub-client is attempted
    before this error is raised.

    Attributes:
        failures: ``(sub_client_name, exception)`` pairs, in registry order.
    """

    def __init__(self, failures: list[tuple[str, BaseException]]):
        names = ", ".join(name for name, _ in failures)
        super().__init__(f"Credential update failed for sub-clients: {names}")
        self.failures = failures


class StorageConnectionError(ApiClientError):
    """Raised when the token storage backend cannot be reached.

    Example:
        try:
            await client.restore_session()
        except StorageConnectionError:
            logger.warning("Token storage unavailable, starting unauthenticated")
    """

    pass


class StorageOperationError(ApiClientError):
    """Raised when a token storage operation fails after connecting.

    Typical causes are corrupt stored payloads or backend-specific errors.
    """

    pass


__all__ = [
    "ApiClientError",
    "ConfigurationError",
    "CredentialSyncError",
    "DatabaseHeuristicError",
    "HttpError",
    "NetworkError",
    "ProblemDetailError",
    "RequestCancelledError",
    "RequestError",
    "RequestFailedError",
    "RequestTimeoutError",
    "StorageConnectionError",
    "StorageOperationError",
]
