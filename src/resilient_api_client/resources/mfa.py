# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Multi-factor authentication endpoints."""

from typing import Any

from ..core.base_client import BaseApiClient


class MfaClient(BaseApiClient):
    async def setup(self, **options: Any) -> Any:
        """Start TOTP enrolment; returns the secret and QR code."""
        return await self._get("/auth/mfa/setup", **options)

    async def enable(self, data: dict[str, Any], **options: Any) -> Any:
        return await self._post("/auth/mfa/enable", data, **options)

    async def verify(self, data: dict[str, Any], **options: Any) -> Any:
        return await self._post("/auth/mfa/verify", data, **options)

    async def disable(self, password: str, **options: Any) -> None:
        await self._post("/auth/mfa/disable", {"password": password}, **options)

    async def generate_backup_codes(self, password: str, **options: Any) -> Any:
        return await self._post("/auth/mfa/backup-codes", {"password": password}, **options)

    async def get_status(self, **options: Any) -> Any:
        return await self._get("/auth/mfa/status", **options)


__all__ = ["MfaClient"]
