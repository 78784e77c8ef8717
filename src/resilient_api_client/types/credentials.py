# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Credential state snapshot."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class CredentialState:
    """
    Authentication state held by one CredentialStore.

    Instances are immutable; the store swaps the whole snapshot on every
    mutation so a concurrent reader sees either the old or the new state.

    Attributes:
        access_token: Bearer token, ``None`` when unauthenticated
        api_key: API key sent as ``X-API-Key``, independent of the session
        session_expires_at: Epoch seconds after which the token is void
        last_activity_at: Epoch seconds of the last token update or touch
    """

    access_token: str | None = None
    api_key: str | None = None
    session_expires_at: float | None = None
    last_activity_at: float | None = None

    @property
    def is_empty(self) -> bool:
        return self.access_token is None and self.api_key is None


EMPTY_CREDENTIALS = CredentialState()


class CredentialPhase(Enum):
    """Observable authentication phase of a client."""

    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"
    EXPIRED = "expired"


__all__ = ["EMPTY_CREDENTIALS", "CredentialPhase", "CredentialState"]
