# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Type definitions for the resilient API client.

This module re-exports the value types shared by the dispatcher, the
credential store and the error classifier.
"""

from .cancellation import CancellationToken
from .credentials import EMPTY_CREDENTIALS, CredentialPhase, CredentialState
from .failure import NETWORK_CODES, PROTOCOL_CODES, TIMEOUT_CODES, AttemptFailure
from .problem import ProblemDetail, is_problem_detail
from .request import ALLOWED_METHODS, RequestDescriptor, ResponseType

__all__ = [
    "ALLOWED_METHODS",
    "EMPTY_CREDENTIALS",
    "NETWORK_CODES",
    "PROTOCOL_CODES",
    "TIMEOUT_CODES",
    "AttemptFailure",
    "CancellationToken",
    "CredentialPhase",
    "CredentialState",
    "ProblemDetail",
    "RequestDescriptor",
    "ResponseType",
    "is_problem_detail",
]
