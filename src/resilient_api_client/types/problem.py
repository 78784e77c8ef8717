# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""RFC 7807 Problem Detail representation."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


def is_problem_detail(body: Any) -> bool:
    """
    Check whether a decoded error body has the Problem Detail shape.

    A body qualifies when it is a mapping with non-empty ``type`` and
    ``title`` fields and a numeric ``status``.
    """
    if not isinstance(body, Mapping):
        return False
    status = body.get("status")
    return (
        bool(body.get("type"))
        and bool(body.get("title"))
        and isinstance(status, (int, float))
        and not isinstance(status, bool)
    )


@dataclass(frozen=True)
class ProblemDetail:
    """
    A server error in RFC 7807 form.

    The typed fields are read from ``body`` for convenience; ``body`` itself
    is the unmodified mapping the server returned, including any extension
    members.
    """

    type: str
    title: str
    status: int
    detail: str | None = None
    instance: str | None = None
    body: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_body(cls, body: Mapping[str, Any]) -> "ProblemDetail":
        return cls(
            type=body["type"],
            title=body["title"],
            status=int(body["status"]),
            detail=body.get("detail"),
            instance=body.get("instance"),
            body=body,
        )


__all__ = ["ProblemDetail", "is_problem_detail"]
