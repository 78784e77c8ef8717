# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Persisted session models.

A StoredSession is what token storage keeps between process restarts: the
credential snapshot of the composed client plus the refresh token handed out
at login.
"""

import time

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..types.credentials import CredentialState


class StoredSession(BaseModel):
    """
    Serializable credential snapshot.

    Timestamps are epoch seconds, as in CredentialState.
    """

    model_config = ConfigDict(frozen=True)

    access_token: str | None = None
    refresh_token: str | None = None
    api_key: str | None = None
    session_expires_at: float | None = None
    last_activity_at: float | None = None
    session_duration: float | None = Field(default=None, gt=0)
    saved_at: float = Field(default_factory=time.time)

    @model_validator(mode="after")
    def _validate_expiration(self) -> "StoredSession":
        """A session deadline only makes sense alongside a token."""
        if self.session_expires_at is not None and self.access_token is None:
            raise ValueError("session_expires_at requires access_token")
        if (
            self.session_expires_at is not None
            and self.last_activity_at is not None
            and self.session_expires_at < self.last_activity_at
        ):
            raise ValueError("session_expires_at must not precede last_activity_at")
        return self

    def is_expired(self, now: float | None = None) -> bool:
        """True once the stored session deadline has passed."""
        if self.session_expires_at is None:
            return False
        current = time.time() if now is None else now
        return current > self.session_expires_at

    @classmethod
    def from_state(
        cls,
        state: CredentialState,
        refresh_token: str | None = None,
        session_duration: float | None = None,
        saved_at: float | None = None,
    ) -> "StoredSession":
        extra = {} if saved_at is None else {"saved_at": saved_at}
        return cls(
            access_token=state.access_token,
            refresh_token=refresh_token,
            api_key=state.api_key,
            session_expires_at=state.session_expires_at,
            last_activity_at=state.last_activity_at,
            session_duration=session_duration,
            **extra,
        )

    def to_state(self) -> CredentialState:
        return CredentialState(
            access_token=self.access_token,
            api_key=self.api_key,
            session_expires_at=self.session_expires_at,
            last_activity_at=self.last_activity_at,
        )


__all__ = ["StoredSession"]
