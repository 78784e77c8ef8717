# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Error classification for failed request attempts.

``classify_failure`` maps one AttemptFailure to exactly one typed error:

1. Problem Detail body (``type``, ``title``, numeric ``status``) is passed
   through verbatim as ProblemDetailError.
2. Any other response becomes HttpError, taking ``message``, ``error`` and
   ``details``/``errors`` from the body when present.
3. Without a response the cause is guessed from incidental signals, in
   order: timeout, network-unreachable code, "database"/"connection" in the
   message, and finally a generic RequestError.

Step 3 is a heuristic. Connection failures carry no structured information,
so DatabaseHeuristicError in particular is only a substring match.

``failure_from_exception`` and ``failure_from_response`` build the
AttemptFailure from what ``httpx`` hands back.
"""

import errno
import logging
import socket
from collections.abc import Mapping
from typing import Any

import httpx

from .exceptions import (
    DatabaseHeuristicError,
    HttpError,
    NetworkError,
    ProblemDetailError,
    RequestError,
    RequestFailedError,
    RequestTimeoutError,
)
from .types.failure import AttemptFailure
from .types.problem import ProblemDetail, is_problem_detail

logger = logging.getLogger(__name__)

TIMEOUT_MESSAGE = "Request timeout"
NETWORK_MESSAGE = "Network error - server may be unreachable"
DATABASE_MESSAGE = "Database connection error"
NO_RESPONSE_MESSAGE = "No response from server"


def classify_failure(failure: AttemptFailure) -> RequestFailedError:
    """
    Produce the typed error for a failed attempt.

    Pure function: no logging side effects beyond DEBUG, no state.
    """
    body = failure.body

    if is_problem_detail(body):
        return ProblemDetailError(ProblemDetail.from_body(body))

    if failure.has_response:
        status = failure.status_code or 0
        fields: Mapping[str, Any] = body if isinstance(body, Mapping) else {}
        details = fields.get("details")
        if details is None:
            details = fields.get("errors")
        return HttpError(
            status_code=status,
            message=fields.get("message") or failure.message,
            error_code=fields.get("error") or failure.code,
            details=details,
            body=body,
        )

    if not failure.request_sent:
        return RequestError(failure.message or NO_RESPONSE_MESSAGE)
    if failure.is_protocol_error:
        return RequestError(failure.message)

    if failure.is_timeout:
        return RequestTimeoutError(TIMEOUT_MESSAGE)
    if failure.is_network_unreachable:
        return NetworkError(NETWORK_MESSAGE)

    lowered = failure.message.lower()
    if "database" in lowered or "connection" in lowered:
        logger.debug(f"Classifying as database error by message: {failure.message}")
        return DatabaseHeuristicError(DATABASE_MESSAGE)

    return RequestError(NO_RESPONSE_MESSAGE, error_code="CONNECTION_ERROR")


# =============================================================================
# Building failures from httpx outcomes
# =============================================================================


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def failure_from_response(response: httpx.Response, attempt: int) -> AttemptFailure:
    """Describe an error response (status >= 400)."""
    status = response.status_code
    return AttemptFailure(
        attempt=attempt,
        status_code=status,
        body=_decode_body(response),
        headers=dict(response.headers),
        message=f"Request failed with status code {status}",
        code="ERR_BAD_RESPONSE" if status >= 500 else "ERR_BAD_REQUEST",
    )


def _connect_error_code(exc: BaseException) -> str:
    """Best-effort errno-style code for a failed connection."""
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, socket.gaierror):
            return "ENOTFOUND"
        if isinstance(current, ConnectionRefusedError) or (
            isinstance(current, OSError) and current.errno == errno.ECONNREFUSED
        ):
            return "ECONNREFUSED"
        current = current.__cause__ or current.__context__
    return "ERR_NETWORK"


def failure_from_exception(exc: BaseException, attempt: int) -> AttemptFailure:
    """
    Describe an attempt that produced no response.

    Args:
        exc: The exception raised while building or sending the request
        attempt: 1-based attempt number

    Returns:
        AttemptFailure with no status code and, where recognisable, a code
    """
    message = str(exc) or exc.__class__.__name__
    if isinstance(exc, httpx.TimeoutException):
        code: str | None = "ETIMEDOUT"
    elif isinstance(exc, httpx.ConnectError):
        code = _connect_error_code(exc)
    elif isinstance(exc, httpx.DecodingError):
        code = "ERR_DECODING"
    elif isinstance(exc, httpx.TooManyRedirects):
        code = "ERR_TOO_MANY_REDIRECTS"
    else:
        code = None

    # Errors raised before anything went over the wire
    request_sent = not isinstance(
        exc, (httpx.UnsupportedProtocol, httpx.InvalidURL, TypeError, ValueError)
    )
    return AttemptFailure(
        attempt=attempt,
        message=message,
        code=code,
        request_sent=request_sent,
        exception=exc,
    )


__all__ = [
    "DATABASE_MESSAGE",
    "NETWORK_MESSAGE",
    "NO_RESPONSE_MESSAGE",
    "TIMEOUT_MESSAGE",
    "classify_failure",
    "failure_from_exception",
    "failure_from_response",
]
