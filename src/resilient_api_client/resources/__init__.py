# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Domain sub-clients.

Each sub-client is a BaseApiClient subclass that maps methods to API
paths. All of them accept the same keyword options on every call
(``headers``, ``override_headers``, ``timeout``, ``cancellation``).
"""

from .admin import (
    AdminClients,
    AdminRateLimitClient,
    AdminUsersClient,
    SecuritySettingsClient,
)
from .api_keys import ApiKeyClient
from .auth import AuthClient
from .entities import EntitiesClient
from .mfa import MfaClient
from .oauth import OAuthClient
from .sessions import SessionClient
from .uploads import FileUploadClient
from .user_rate_limits import UserRateLimitClient

__all__ = [
    "AdminClients",
    "AdminRateLimitClient",
    "AdminUsersClient",
    "ApiKeyClient",
    "AuthClient",
    "EntitiesClient",
    "FileUploadClient",
    "MfaClient",
    "OAuthClient",
    "SecuritySettingsClient",
    "SessionClient",
    "UserRateLimitClient",
]
