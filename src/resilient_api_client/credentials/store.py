# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Credential store for one API client instance.

Holds the bearer token, API key and session timing. Every mutation replaces
the whole CredentialState snapshot in a single assignment, so readers never
observe a half-updated state and no lock is needed.

Session expiry is lazy: nothing runs in the background. The first token read
after the session deadline tears down the whole state (token, API key,
expiry, activity) and reports the token as absent.
"""

import logging
import time
from collections.abc import Callable

from ..config import DEFAULT_SESSION_DURATION
from ..exceptions import ConfigurationError
from ..types.credentials import EMPTY_CREDENTIALS, CredentialState

logger = logging.getLogger(__name__)

AUTHORIZATION_HEADER = "Authorization"
API_KEY_HEADER = "X-API-Key"


class CredentialStore:
    """
    Authentication state owned by exactly one client.

    Example:
        store = CredentialStore(session_duration=3600)
        store.set_access_token("abc")
        store.credential_headers()  # {"Authorization": "Bearer abc"}
    """

    def __init__(
        self,
        session_duration: float = DEFAULT_SESSION_DURATION,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize an empty store.

        Args:
            session_duration: Seconds a token stays valid after being set
            clock: Returns the current time as epoch seconds
        """
        self._clock = clock
        self._state: CredentialState = EMPTY_CREDENTIALS
        self.session_duration = session_duration

    @property
    def session_duration(self) -> float:
        return self._session_duration

    @session_duration.setter
    def session_duration(self, value: float) -> None:
        if value <= 0:
            raise ConfigurationError("session_duration must be positive")
        self._session_duration = float(value)

    # ==========================================================================
    # Access token
    # ==========================================================================

    def set_access_token(self, token: str | None) -> None:
        """
        Set or clear the bearer token.

        Setting a token restarts the session window. Clearing it drops the
        expiry and activity timestamps as well; the API key is kept.
        """
        current = self._state
        if token:
            now = self._clock()
            self._state = CredentialState(
                access_token=token,
                api_key=current.api_key,
                session_expires_at=now + self._session_duration,
                last_activity_at=now,
            )
            logger.debug(
                f"Access token set, session expires in {self._session_duration:.0f}s"
            )
        else:
            self._state = CredentialState(api_key=current.api_key)
            logger.debug("Access token cleared")

    def get_access_token(self) -> str | None:
        """Return the live token, tearing down the session if it has expired."""
        state = self._state
        if self._expired(state):
            logger.info("Session expired, clearing all credentials")
            self.clear()
            return None
        return state.access_token

    # ==========================================================================
    # API key
    # ==========================================================================

    def set_api_key(self, key: str | None) -> None:
        """Set or clear the API key. API keys have no expiry."""
        current = self._state
        self._state = CredentialState(
            access_token=current.access_token,
            api_key=key or None,
            session_expires_at=current.session_expires_at,
            last_activity_at=current.last_activity_at,
        )
        logger.debug(f"API key {'set' if key else 'cleared'}")

    def get_api_key(self) -> str | None:
        return self._state.api_key

    # ==========================================================================
    # Session
    # ==========================================================================

    def clear(self) -> None:
        """Drop token, API key, expiry and activity in one assignment."""
        self._state = EMPTY_CREDENTIALS

    def touch(self) -> None:
        """Record activity without extending the session.

        A session that has already passed its deadline is left untouched, so
        activity never lands after ``session_expires_at``.
        """
        current = self._state
        if current.access_token is None or self._expired(current):
            return
        self._state = CredentialState(
            access_token=current.access_token,
            api_key=current.api_key,
            session_expires_at=current.session_expires_at,
            last_activity_at=self._clock(),
        )

    def is_session_expired(self) -> bool:
        """Check expiry without side effects."""
        return self._expired(self._state)

    def remaining_session_time(self) -> float:
        """Seconds until the session expires, 0.0 when there is no session."""
        expires_at = self._state.session_expires_at
        if expires_at is None:
            return 0.0
        return max(0.0, expires_at - self._clock())

    def snapshot(self) -> CredentialState:
        """Return the current state without checking expiry."""
        return self._state

    def restore(self, state: CredentialState) -> None:
        """Load a previously persisted state verbatim."""
        self._state = state

    def credential_headers(self) -> dict[str, str]:
        """Headers derived from the current credentials."""
        headers: dict[str, str] = {}
        token = self.get_access_token()
        if token:
            headers[AUTHORIZATION_HEADER] = f"Bearer {token}"
        api_key = self._state.api_key
        if api_key:
            headers[API_KEY_HEADER] = api_key
        return headers

    def _expired(self, state: CredentialState) -> bool:
        expires_at = state.session_expires_at
        return expires_at is not None and self._clock() > expires_at


__all__ = ["API_KEY_HEADER", "AUTHORIZATION_HEADER", "CredentialStore"]
