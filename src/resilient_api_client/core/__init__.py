# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Core client building blocks."""

from .base_client import BaseApiClient, build_http_client

__all__ = ["BaseApiClient", "build_http_client"]
