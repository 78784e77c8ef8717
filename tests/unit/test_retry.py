# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Tests for the retry predicate and RetryController backoff math."""

import random
from unittest.mock import Mock

import pytest

from resilient_api_client.config import RetryPolicy, default_retry_predicate
from resilient_api_client.retry import RetryController
from resilient_api_client.types.failure import PROTOCOL_CODES, AttemptFailure


def response_failure(status: int) -> AttemptFailure:
    return AttemptFailure(attempt=1, status_code=status)


class TestDefaultPredicate:
    @pytest.mark.parametrize("status", [500, 502, 503, 504, 599, 429, 408])
    def test_retryable_statuses(self, status):
        assert default_retry_predicate(response_failure(status)) is True

    @pytest.mark.parametrize("status", [400, 401, 403, 404, 409, 422])
    def test_terminal_statuses(self, status):
        assert default_retry_predicate(response_failure(status)) is False

    def test_no_response_is_retryable(self):
        failure = AttemptFailure(attempt=1, code="ETIMEDOUT")
        assert default_retry_predicate(failure) is True

    def test_unsent_request_is_not_retryable(self):
        failure = AttemptFailure(attempt=1, request_sent=False)
        assert default_retry_predicate(failure) is False

    @pytest.mark.parametrize("code", sorted(PROTOCOL_CODES))
    def test_protocol_failure_is_not_retryable(self, code):
        failure = AttemptFailure(attempt=1, code=code)
        assert default_retry_predicate(failure) is False


class TestShouldRetry:
    def test_respects_max_retries(self):
        controller = RetryController(RetryPolicy(max_retries=2))
        failure = response_failure(503)

        assert controller.should_retry(1, failure) is True
        assert controller.should_retry(2, failure) is True
        assert controller.should_retry(3, failure) is False

    def test_budget_wins_over_predicate(self):
        predicate = Mock(return_value=True)
        controller = RetryController(RetryPolicy(max_retries=0, retry_predicate=predicate))

        assert controller.should_retry(1, response_failure(503)) is False
        predicate.assert_not_called()

    def test_predicate_errors_propagate(self):
        def broken(failure):
            raise RuntimeError("predicate bug")

        controller = RetryController(RetryPolicy(retry_predicate=broken))
        with pytest.raises(RuntimeError, match="predicate bug"):
            controller.should_retry(1, response_failure(503))


class TestDelays:
    def test_exponential_base(self):
        controller = RetryController(RetryPolicy(base_delay=1.0, max_delay=30.0))
        assert [controller.base_delay_for(n) for n in range(1, 7)] == [
            1.0,
            2.0,
            4.0,
            8.0,
            16.0,
            30.0,
        ]

    def test_jitter_is_bounded(self):
        controller = RetryController(rng=random.Random(1))
        for attempt in range(1, 6):
            base = controller.base_delay_for(attempt)
            delay = controller.delay_for(attempt)
            assert base <= delay <= base + 1.0

    def test_seeded_rng_is_reproducible(self):
        first = RetryController(rng=random.Random(7))
        second = RetryController(rng=random.Random(7))
        assert [first.delay_for(n) for n in (1, 2, 3)] == [
            second.delay_for(n) for n in (1, 2, 3)
        ]

    def test_no_jitter(self):
        controller = RetryController(RetryPolicy(jitter_max=0.0))
        assert controller.delay_for(2) == 2.0


class TestNotifyRetry:
    def test_calls_hook(self):
        hook = Mock()
        controller = RetryController(RetryPolicy(on_retry=hook))
        failure = response_failure(500)

        controller.notify_retry(2, failure)

        hook.assert_called_once_with(2, failure)

    def test_hook_errors_are_logged(self, caplog):
        controller = RetryController(
            RetryPolicy(on_retry=Mock(side_effect=ValueError("bad hook")))
        )

        controller.notify_retry(1, response_failure(500))

        assert "bad hook" in caplog.text


class TestPolicyValidation:
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_retries": -1},
            {"base_delay": -0.5},
            {"base_delay": 5.0, "max_delay": 1.0},
            {"jitter_max": -1.0},
        ],
    )
    def test_invalid_policies(self, kwargs):
        from resilient_api_client.exceptions import ConfigurationError

        with pytest.raises(ConfigurationError):
            RetryPolicy(**kwargs)
