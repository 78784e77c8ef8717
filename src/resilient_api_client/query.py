# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Query string helpers.

Query parameters use the bracket convention expected by the API server:
lists become ``key[]=a&key[]=b``, nested mappings become ``key[sub]=v``,
booleans are lowercased and ``None`` values are skipped.
"""

from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _flatten(prefix: str, value: Any, out: list[tuple[str, str]]) -> None:
    if value is None:
        return
    if isinstance(value, Mapping):
        for key, item in value.items():
            _flatten(f"{prefix}[{key}]", item, out)
    elif isinstance(value, (list, tuple, set, frozenset)):
        for item in value:
            _flatten(f"{prefix}[]", item, out)
    else:
        out.append((prefix, _scalar(value)))


def flatten_query_params(params: Mapping[str, Any] | None) -> list[tuple[str, str]]:
    """Flatten a parameter mapping into ordered ``(key, value)`` pairs."""
    out: list[tuple[str, str]] = []
    for key, value in (params or {}).items():
        _flatten(str(key), value, out)
    return out


def build_query_string(params: Mapping[str, Any] | None) -> str:
    """Build an encoded query string (without the leading ``?``)."""
    return urlencode(flatten_query_params(params))


def append_query_params(url: str, params: Mapping[str, Any] | None) -> str:
    """Append query parameters to a URL that may already carry a query."""
    query = build_query_string(params)
    if not query:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{query}"


__all__ = ["append_query_params", "build_query_string", "flatten_query_params"]
