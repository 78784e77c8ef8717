# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Credential management for API client instances."""

from .store import API_KEY_HEADER, AUTHORIZATION_HEADER, CredentialStore

__all__ = ["API_KEY_HEADER", "AUTHORIZATION_HEADER", "CredentialStore"]
