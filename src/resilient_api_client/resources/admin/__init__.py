# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Administrative sub-clients."""

from dataclasses import dataclass

from .rate_limits import AdminRateLimitClient
from .security import SecuritySettingsClient
from .users import AdminUsersClient


@dataclass(frozen=True)
class AdminClients:
    """Grouping of the admin sub-clients exposed as ``ApiClient.admin``."""

    users: AdminUsersClient
    rate_limits: AdminRateLimitClient
    security: SecuritySettingsClient


__all__ = [
    "AdminClients",
    "AdminRateLimitClient",
    "AdminUsersClient",
    "SecuritySettingsClient",
]
