# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Retry and backoff decisions for failed attempts.

The controller only decides; it never sleeps. The dispatcher asks
``should_retry`` after every failed attempt and, on a yes, suspends for
``delay_for`` seconds before re-sending the same descriptor.

Jitter is drawn from an injectable ``random.Random`` so tests can seed it.
"""

import logging
import random

from .config import RetryPolicy, default_retry_predicate
from .types.failure import AttemptFailure

logger = logging.getLogger(__name__)


class RetryController:
    """
    Applies a RetryPolicy to individual failures.

    Attempt numbers are 1-based: attempt 1 is the original request, so
    ``delay_for(1)`` is the wait between attempt 1 and attempt 2.

    Example:
        controller = RetryController(RetryPolicy(max_retries=2), rng=random.Random(7))
        if controller.should_retry(1, failure):
            await asyncio.sleep(controller.delay_for(1))
    """

    def __init__(
        self,
        policy: RetryPolicy | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.policy = policy or RetryPolicy()
        # Each controller draws from its own generator
        self._rng = rng or random.Random()  # noqa: S311  # nosec B311

    def should_retry(self, attempt: int, failure: AttemptFailure) -> bool:
        """
        Decide whether to retry after ``attempt`` failed.

        Refuses once the retry budget is spent, whatever the predicate says.
        """
        if attempt > self.policy.max_retries:
            return False
        return bool(self.policy.retry_predicate(failure))

    def base_delay_for(self, attempt: int) -> float:
        """Exponential part of the delay, without jitter."""
        exponent = max(attempt, 1) - 1
        return min(self.policy.base_delay * (2**exponent), self.policy.max_delay)

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait after ``attempt`` failed, jitter included."""
        jitter = (
            self._rng.uniform(0, self.policy.jitter_max)
            if self.policy.jitter_max > 0
            else 0.0
        )
        return self.base_delay_for(attempt) + jitter

    def notify_retry(self, attempt: int, failure: AttemptFailure) -> None:
        """Invoke the policy's on_retry hook, if any."""
        if self.policy.on_retry is None:
            return
        try:
            self.policy.on_retry(attempt, failure)
        except Exception as e:
            logger.warning(f"on_retry callback raised: {e}")


__all__ = ["RetryController", "RetryPolicy", "default_retry_predicate"]
