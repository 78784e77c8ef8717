# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Unit tests for the request metrics collector.

Tests cover:
- Dispatcher hooks (attempts, retries, outcomes, invalidations)
- Label cardinality protection
- Prometheus mirroring on a private or shared registry
"""

from __future__ import annotations

import pytest
from prometheus_client import CollectorRegistry

from resilient_api_client.observability import (
    ATTEMPTS_TOTAL,
    FAILURES_TOTAL,
    REQUEST_DURATION_SECONDS,
    REQUESTS_TOTAL,
    RETRIES_TOTAL,
    SESSION_INVALIDATIONS_TOTAL,
)
from resilient_api_client.observability.collector import (
    METRIC_DEFINITIONS,
    RequestMetricsCollector,
)


@pytest.fixture
def collector() -> RequestMetricsCollector:
    return RequestMetricsCollector()


class TestDefinitions:
    def test_all_metrics_defined(self) -> None:
        for name in (
            REQUESTS_TOTAL,
            ATTEMPTS_TOTAL,
            RETRIES_TOTAL,
            FAILURES_TOTAL,
            SESSION_INVALIDATIONS_TOTAL,
            REQUEST_DURATION_SECONDS,
        ):
            assert name in METRIC_DEFINITIONS
            assert name.startswith("api_client_")

    def test_duration_is_histogram(self) -> None:
        assert METRIC_DEFINITIONS[REQUEST_DURATION_SECONDS].metric_type == "histogram"


class TestDispatcherHooks:
    def test_attempts_and_retries(self, collector: RequestMetricsCollector) -> None:
        collector.record_attempt("GET")
        collector.record_attempt("GET")
        collector.record_retry("GET")

        assert collector.get_counter(ATTEMPTS_TOTAL, {"method": "GET"}) == 2
        assert collector.get_counter(RETRIES_TOTAL, {"method": "GET"}) == 1
        assert collector.get_counter(RETRIES_TOTAL, {"method": "POST"}) == 0

    def test_success_outcome(self, collector: RequestMetricsCollector) -> None:
        collector.record_outcome("POST", "success", 0.25)

        assert collector.get_counter(
            REQUESTS_TOTAL, {"method": "POST", "outcome": "success"}
        ) == 1
        assert FAILURES_TOTAL not in collector.get_metrics()["counters"]
        histogram = collector.get_metrics()["histograms"][REQUEST_DURATION_SECONDS]
        assert histogram["method=POST"]["count"] == 1
        assert histogram["method=POST"]["sum"] == 0.25

    def test_failure_outcome(self, collector: RequestMetricsCollector) -> None:
        collector.record_outcome("GET", "failure", 1.0, "TIMEOUT_ERROR")

        assert collector.get_counter(FAILURES_TOTAL, {"error_code": "TIMEOUT_ERROR"}) == 1

    def test_session_invalidation(self, collector: RequestMetricsCollector) -> None:
        collector.record_session_invalidation("unauthorized")
        assert collector.get_counter(
            SESSION_INVALIDATIONS_TOTAL, {"reason": "unauthorized"}
        ) == 1

    def test_label_key_is_sorted(self, collector: RequestMetricsCollector) -> None:
        collector.record_outcome("GET", "cancelled", 0.1)
        counters = collector.get_metrics()["counters"][REQUESTS_TOTAL]
        assert list(counters) == ["method=GET,outcome=cancelled"]

    def test_negative_increment_rejected(self, collector: RequestMetricsCollector) -> None:
        with pytest.raises(ValueError):
            collector.inc_counter(ATTEMPTS_TOTAL, -1, {"method": "GET"})

    def test_reset(self, collector: RequestMetricsCollector) -> None:
        collector.record_attempt("GET")
        collector.reset()
        assert collector.get_metrics() == {"counters": {}, "histograms": {}}


class TestCardinality:
    def test_limit_drops_new_combinations(self, monkeypatch) -> None:
        monkeypatch.setattr(RequestMetricsCollector, "MAX_LABEL_COMBINATIONS", 2)
        collector = RequestMetricsCollector(enable_prometheus=False)

        for method in ("GET", "POST", "PUT"):
            collector.record_attempt(method)
        collector.record_attempt("GET")

        assert collector.get_counter(ATTEMPTS_TOTAL, {"method": "GET"}) == 2
        assert collector.get_counter(ATTEMPTS_TOTAL, {"method": "PUT"}) == 0


class TestPrometheus:
    def test_mirrors_into_registry(self) -> None:
        registry = CollectorRegistry()
        collector = RequestMetricsCollector(registry=registry)

        collector.record_attempt("DELETE")
        collector.record_outcome("DELETE", "failure", 0.5, "NETWORK_ERROR")

        assert registry.get_sample_value(
            "api_client_attempts_total", {"method": "DELETE"}
        ) == 1.0
        assert registry.get_sample_value(
            "api_client_failures_total", {"error_code": "NETWORK_ERROR"}
        ) == 1.0
        assert registry.get_sample_value(
            "api_client_request_duration_seconds_count", {"method": "DELETE"}
        ) == 1.0

    def test_private_registries_are_independent(self) -> None:
        first = RequestMetricsCollector()
        second = RequestMetricsCollector()

        first.record_retry("GET")

        assert first.registry is not second.registry
        assert second.registry.get_sample_value(
            "api_client_retries_total", {"method": "GET"}
        ) is None

    def test_shared_registry_registration_conflict_is_logged(self, caplog) -> None:
        registry = CollectorRegistry()
        RequestMetricsCollector(registry=registry)

        second = RequestMetricsCollector(registry=registry)
        second.record_attempt("GET")

        assert "Failed to register Prometheus metric" in caplog.text
        assert second.get_counter(ATTEMPTS_TOTAL, {"method": "GET"}) == 1

    def test_disabled(self) -> None:
        collector = RequestMetricsCollector(enable_prometheus=False)
        collector.record_attempt("GET")
        assert collector.registry.get_sample_value(
            "api_client_attempts_total", {"method": "GET"}
        ) is None
