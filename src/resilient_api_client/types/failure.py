# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Raw failure signal of a single request attempt.

The dispatcher records every failed attempt as an AttemptFailure. The retry
controller decides from it whether to try again and the error classifier
turns the final one into a typed error.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

# Connection-level failure codes
TIMEOUT_CODES = frozenset({"ETIMEDOUT", "ECONNABORTED"})
NETWORK_CODES = frozenset({"ERR_NETWORK", "ENOTFOUND", "ECONNREFUSED"})
# A response arrived but could not be decoded or followed
PROTOCOL_CODES = frozenset({"ERR_DECODING", "ERR_TOO_MANY_REDIRECTS"})


@dataclass(frozen=True)
class AttemptFailure:
    """
    What went wrong with one attempt.

    Attributes:
        attempt: 1-based attempt number
        status_code: HTTP status when a response was received, else ``None``
        body: Decoded response body (JSON value or text), if any
        headers: Response headers, if any
        message: Underlying error message
        code: Low-level failure code (see the *_CODES sets above)
        request_sent: False when the request could not even be built or sent
        exception: The underlying exception, if any
    """

    attempt: int
    status_code: int | None = None
    body: Any = None
    headers: Mapping[str, str] = field(default_factory=dict)
    message: str = ""
    code: str | None = None
    request_sent: bool = True
    exception: BaseException | None = None

    @property
    def has_response(self) -> bool:
        return self.status_code is not None

    @property
    def is_timeout(self) -> bool:
        return self.code in TIMEOUT_CODES

    @property
    def is_network_unreachable(self) -> bool:
        return self.code in NETWORK_CODES

    @property
    def is_protocol_error(self) -> bool:
        return self.code in PROTOCOL_CODES


__all__ = ["NETWORK_CODES", "PROTOCOL_CODES", "TIMEOUT_CODES", "AttemptFailure"]
