# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Caller-owned cancellation handle for in-flight requests."""

import asyncio
import logging

logger = logging.getLogger(__name__)


class CancellationToken:
    """
    Cancellation handle shared between a caller and the dispatcher.

    The caller keeps a reference and calls ``cancel()``; the dispatcher races
    both the network attempt and any retry delay against ``wait()``. Once
    cancelled a token stays cancelled.

    Example:
        token = CancellationToken()
        task = asyncio.create_task(
            client.entities.list_entities(cancellation=token)
        )
        token.cancel("user navigated away")
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self.reason: str | None = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str | None = None) -> None:
        """Signal cancellation. Repeated calls keep the first reason."""
        if self._event.is_set():
            return
        self.reason = reason
        self._event.set()
        logger.debug(f"Cancellation requested: {reason or 'no reason given'}")

    async def wait(self) -> None:
        """Block until the token is cancelled."""
        await self._event.wait()


__all__ = ["CancellationToken"]
