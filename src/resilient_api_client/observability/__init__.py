# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Observability for the resilient API client.

Classes:
    RequestMetricsCollector: dict + Prometheus metrics for dispatcher activity.
    MetricDefinition: Schema of a predefined metric.
"""

from .collector import METRIC_DEFINITIONS, MetricDefinition, RequestMetricsCollector
from .constants import (
    ATTEMPTS_TOTAL,
    FAILURES_TOTAL,
    LATENCY_BUCKETS,
    METRIC_PREFIX,
    REQUEST_DURATION_SECONDS,
    REQUESTS_TOTAL,
    RETRIES_TOTAL,
    SESSION_INVALIDATIONS_TOTAL,
)

__all__ = [
    "ATTEMPTS_TOTAL",
    "FAILURES_TOTAL",
    "LATENCY_BUCKETS",
    "METRIC_DEFINITIONS",
    "METRIC_PREFIX",
    "REQUESTS_TOTAL",
    "REQUEST_DURATION_SECONDS",
    "RETRIES_TOTAL",
    "SESSION_INVALIDATIONS_TOTAL",
    "MetricDefinition",
    "RequestMetricsCollector",
]
