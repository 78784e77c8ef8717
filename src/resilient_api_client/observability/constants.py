# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Metric name constants following Prometheus naming conventions.

All metric names use the ``api_client_`` prefix.

Label Best Practices:
    Only bounded, categorical labels are used:
    - ``method`` - HTTP verb
    - ``outcome`` - success, failure, cancelled
    - ``error_code`` - typed error code (NETWORK_ERROR, TIMEOUT_ERROR, ...)
    - ``reason`` - why a session was invalidated

    NEVER label by path, token, or request id (unbounded cardinality).
"""

METRIC_PREFIX = "api_client"
"""Prefix for all Prometheus metrics in this library."""

REQUESTS_TOTAL = f"{METRIC_PREFIX}_requests_total"
"""Logical calls finished, by method and outcome."""

ATTEMPTS_TOTAL = f"{METRIC_PREFIX}_attempts_total"
"""Network attempts made, including retries."""

RETRIES_TOTAL = f"{METRIC_PREFIX}_retries_total"
"""Retries scheduled after a transient failure."""

FAILURES_TOTAL = f"{METRIC_PREFIX}_failures_total"
"""Calls that ended in a typed error, by error code."""

SESSION_INVALIDATIONS_TOTAL = f"{METRIC_PREFIX}_session_invalidations_total"
"""Credential teardowns triggered by the client (401, expiry)."""

REQUEST_DURATION_SECONDS = f"{METRIC_PREFIX}_request_duration_seconds"
"""Wall time of a logical call, retries and delays included."""

LATENCY_BUCKETS = [0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0]
"""Histogram buckets for request duration."""


__all__ = [
    "ATTEMPTS_TOTAL",
    "FAILURES_TOTAL",
    "LATENCY_BUCKETS",
    "METRIC_PREFIX",
    "REQUESTS_TOTAL",
    "REQUEST_DURATION_SECONDS",
    "RETRIES_TOTAL",
    "SESSION_INVALIDATIONS_TOTAL",
]
