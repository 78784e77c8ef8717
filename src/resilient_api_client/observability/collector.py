# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Request metrics collector backed by prometheus_client.

Every collector keeps plain dict counters for in-process inspection
(``get_metrics()``) and mirrors them into Prometheus metrics registered on
its own CollectorRegistry. Pass ``registry=prometheus_client.REGISTRY`` to
expose them through the default registry instead.

Thread Safety:
    All dict updates happen under an RLock.

Usage:
    >>> collector = RequestMetricsCollector()
    >>> collector.record_attempt("GET")
    >>> collector.get_metrics()["counters"]["api_client_attempts_total"]
    {'method=GET': 1}
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, ClassVar

from prometheus_client import CollectorRegistry, Counter, Histogram

from .constants import (
    ATTEMPTS_TOTAL,
    FAILURES_TOTAL,
    LATENCY_BUCKETS,
    REQUEST_DURATION_SECONDS,
    REQUESTS_TOTAL,
    RETRIES_TOTAL,
    SESSION_INVALIDATIONS_TOTAL,
)

logger = logging.getLogger(__name__)


@dataclass
class MetricDefinition:
    """Schema of one metric: type, description and label names."""

    name: str
    metric_type: str  # 'counter', 'histogram'
    description: str
    label_names: tuple[str, ...] = ()
    buckets: list[float] | None = None


METRIC_DEFINITIONS: dict[str, MetricDefinition] = {
    REQUESTS_TOTAL: MetricDefinition(
        REQUESTS_TOTAL,
        "counter",
        "Total logical API calls finished",
        ("method", "outcome"),
    ),
    ATTEMPTS_TOTAL: MetricDefinition(
        ATTEMPTS_TOTAL,
        "counter",
        "Total network attempts including retries",
        ("method",),
    ),
    RETRIES_TOTAL: MetricDefinition(
        RETRIES_TOTAL,
        "counter",
        "Total retries scheduled",
        ("method",),
    ),
    FAILURES_TOTAL: MetricDefinition(
        FAILURES_TOTAL,
        "counter",
        "Total calls ending in a typed error",
        ("error_code",),
    ),
    SESSION_INVALIDATIONS_TOTAL: MetricDefinition(
        SESSION_INVALIDATIONS_TOTAL,
        "counter",
        "Total client-side session invalidations",
        ("reason",),
    ),
    REQUEST_DURATION_SECONDS: MetricDefinition(
        REQUEST_DURATION_SECONDS,
        "histogram",
        "Duration of logical API calls",
        ("method",),
        buckets=LATENCY_BUCKETS,
    ),
}


class RequestMetricsCollector:
    """
    Counters and histograms describing dispatcher activity.

    A single collector is shared by every sub-client of a composed client.
    """

    # Cap on distinct label combinations per metric
    MAX_LABEL_COMBINATIONS: ClassVar[int] = 1000

    def __init__(
        self,
        registry: CollectorRegistry | None = None,
        enable_prometheus: bool = True,
    ) -> None:
        """
        Args:
            registry: Prometheus registry; a private one is created if omitted
            enable_prometheus: Set False to keep only the dict counters
        """
        self._enable_prometheus = enable_prometheus
        self.registry = registry if registry is not None else CollectorRegistry()

        self._counters: dict[str, dict[str, int]] = defaultdict(
            lambda: defaultdict(int)
        )
        self._histograms: dict[str, dict[str, list[float]]] = defaultdict(
            lambda: defaultdict(list)
        )
        self._label_combinations: dict[str, set[str]] = defaultdict(set)
        self._lock = threading.RLock()

        self._prom: dict[str, Any] = {}
        if self._enable_prometheus:
            self._register_all()

        logger.debug(
            f"RequestMetricsCollector initialized "
            f"(prometheus={'enabled' if self._enable_prometheus else 'disabled'})"
        )

    def _register_all(self) -> None:
        for name, defn in METRIC_DEFINITIONS.items():
            try:
                if defn.metric_type == "counter":
                    self._prom[name] = Counter(
                        name,
                        defn.description,
                        list(defn.label_names),
                        registry=self.registry,
                    )
                else:
                    self._prom[name] = Histogram(
                        name,
                        defn.description,
                        list(defn.label_names),
                        buckets=defn.buckets or LATENCY_BUCKETS,
                        registry=self.registry,
                    )
            except ValueError as e:
                # Already registered on a shared registry
                logger.warning(f"Failed to register Prometheus metric {name}: {e}")

    def _labels_to_key(self, labels: dict[str, str] | None) -> str:
        if not labels:
            return ""
        return ",".join(f"{k}={v}" for k, v in sorted(labels.items()))

    def _check_cardinality(self, name: str, label_key: str) -> bool:
        if label_key in self._label_combinations[name]:
            return True
        if len(self._label_combinations[name]) >= self.MAX_LABEL_COMBINATIONS:
            logger.warning(
                f"Cardinality limit ({self.MAX_LABEL_COMBINATIONS}) reached "
                f"for metric {name}. Dropping label combination: {label_key}"
            )
            return False
        self._label_combinations[name].add(label_key)
        return True

    # === Generic operations ===

    def inc_counter(
        self, name: str, value: int = 1, labels: dict[str, str] | None = None
    ) -> None:
        if value < 0:
            raise ValueError("Counter increment must be non-negative")
        label_key = self._labels_to_key(labels)
        with self._lock:
            if not self._check_cardinality(name, label_key):
                return
            self._counters[name][label_key] += value

        prom_counter = self._prom.get(name)
        if prom_counter is not None:
            if labels:
                prom_counter.labels(**labels).inc(value)
            else:
                prom_counter.inc(value)

    def observe_histogram(
        self, name: str, value: float, labels: dict[str, str] | None = None
    ) -> None:
        label_key = self._labels_to_key(labels)
        with self._lock:
            if not self._check_cardinality(name, label_key):
                return
            observations = self._histograms[name][label_key]
            observations.append(value)
            if len(observations) > 10000:
                self._histograms[name][label_key] = observations[-5000:]

        prom_histogram = self._prom.get(name)
        if prom_histogram is not None:
            if labels:
                prom_histogram.labels(**labels).observe(value)
            else:
                prom_histogram.observe(value)

    # === Dispatcher hooks ===

    def record_attempt(self, method: str) -> None:
        self.inc_counter(ATTEMPTS_TOTAL, labels={"method": method})

    def record_retry(self, method: str) -> None:
        self.inc_counter(RETRIES_TOTAL, labels={"method": method})

    def record_outcome(
        self,
        method: str,
        outcome: str,
        duration: float,
        error_code: str | None = None,
    ) -> None:
        self.inc_counter(REQUESTS_TOTAL, labels={"method": method, "outcome": outcome})
        self.observe_histogram(
            REQUEST_DURATION_SECONDS, duration, labels={"method": method}
        )
        if error_code is not None:
            self.inc_counter(FAILURES_TOTAL, labels={"error_code": error_code})

    def record_session_invalidation(self, reason: str) -> None:
        self.inc_counter(SESSION_INVALIDATIONS_TOTAL, labels={"reason": reason})

    # === Snapshot ===

    def get_counter(self, name: str, labels: dict[str, str] | None = None) -> int:
        with self._lock:
            return self._counters.get(name, {}).get(self._labels_to_key(labels), 0)

    def get_metrics(self) -> dict[str, Any]:
        """
        Snapshot of all dict metrics, suitable for JSON serialization.

        Structure::

            {
                "counters": {"metric_name": {"label_key": value}},
                "histograms": {"metric_name": {"label_key": {count, sum, ...}}},
            }
        """
        with self._lock:
            counters = {
                name: dict(label_values)
                for name, label_values in self._counters.items()
            }
            histograms: dict[str, dict[str, dict[str, float]]] = {}
            for name, label_values in self._histograms.items():
                histograms[name] = {}
                for label_key, observations in label_values.items():
                    if observations:
                        histograms[name][label_key] = {
                            "count": len(observations),
                            "sum": sum(observations),
                            "avg": sum(observations) / len(observations),
                            "min": min(observations),
                            "max": max(observations),
                        }
        return {"counters": counters, "histograms": histograms}

    def reset(self) -> None:
        """Clear the dict metrics. Prometheus series are left untouched."""
        with self._lock:
            self._counters.clear()
            self._histograms.clear()
            self._label_combinations.clear()


__all__ = ["METRIC_DEFINITIONS", "MetricDefinition", "RequestMetricsCollector"]
