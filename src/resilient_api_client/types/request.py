# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Request descriptor types.

A RequestDescriptor captures one logical call (method, path, query, headers,
payload, timeout and cancellation handle). It is created fresh for every call
and never modified afterwards; retries re-send the same descriptor.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from ..query import flatten_query_params
from .cancellation import CancellationToken

ALLOWED_METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE"})


class ResponseType(Enum):
    """How a successful response body is decoded.

    - JSON: parse JSON when the content-type says so, text otherwise
    - TEXT: always return the decoded text
    - BYTES: always return raw bytes (file downloads)
    """

    JSON = "json"
    TEXT = "text"
    BYTES = "bytes"


def _freeze(mapping: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class RequestDescriptor:
    """
    Immutable description of a single logical API call.

    Attributes:
        method: HTTP verb, one of GET/POST/PUT/PATCH/DELETE
        path: Path relative to the configured base URL
        params: Ordered query parameters; ``None`` values are dropped
        headers: Caller headers. Credential headers take precedence over these
        override_headers: Caller headers that win over credential headers
        body: JSON-serializable request body
        content: Raw request body (bytes or str), mutually exclusive with body
        files: Multipart file parts, as accepted by ``httpx``
        data: Multipart/form fields sent alongside ``files``
        timeout: Per-request timeout in seconds, ``None`` for the client default
        cancellation: Optional caller-owned cancellation token
        response_type: How to decode a successful response body
    """

    method: str
    path: str
    params: Mapping[str, Any] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    override_headers: Mapping[str, str] = field(default_factory=dict)
    body: Any = None
    content: bytes | str | None = None
    files: Any = None
    data: Mapping[str, Any] | None = None
    timeout: float | None = None
    cancellation: CancellationToken | None = None
    response_type: ResponseType = ResponseType.JSON

    def __post_init__(self) -> None:
        method = self.method.upper()
        if method not in ALLOWED_METHODS:
            raise ValueError(f"Unsupported HTTP method: {self.method}")
        if self.body is not None and self.content is not None:
            raise ValueError("body and content are mutually exclusive")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be positive")
        object.__setattr__(self, "method", method)
        object.__setattr__(self, "params", _freeze(self.params))
        object.__setattr__(self, "headers", _freeze(self.headers))
        object.__setattr__(self, "override_headers", _freeze(self.override_headers))

    @property
    def query_params(self) -> list[tuple[str, str]]:
        """Query parameters flattened in insertion order, ``None`` values removed."""
        return flatten_query_params(self.params)


__all__ = ["ALLOWED_METHODS", "RequestDescriptor", "ResponseType"]
