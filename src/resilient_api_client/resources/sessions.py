# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Session and trusted-device endpoints."""

from typing import Any

from ..core.base_client import BaseApiClient


class SessionClient(BaseApiClient):
    async def get_sessions(self, **options: Any) -> Any:
        return await self._get("/auth/sessions", **options)

    async def get_current_session(self, **options: Any) -> Any:
        return await self._get("/auth/sessions/current", **options)

    async def revoke_session(self, session_id: str, **options: Any) -> None:
        await self._delete(f"/auth/sessions/{session_id}", **options)

    async def revoke_all_sessions(self, **options: Any) -> None:
        await self._delete("/auth/sessions", **options)

    async def get_session_stats(self, **options: Any) -> Any:
        return await self._get("/auth/sessions/stats", **options)

    async def get_trusted_devices(self, **options: Any) -> Any:
        return await self._get("/auth/sessions/trusted-devices", **options)

    async def trust_device(self, device_name: str | None = None, **options: Any) -> Any:
        return await self._post(
            "/auth/sessions/trust-device", {"deviceName": device_name}, **options
        )

    async def remove_trusted_device(self, fingerprint: str, **options: Any) -> None:
        await self._delete(f"/auth/sessions/trusted-devices/{fingerprint}", **options)


__all__ = ["SessionClient"]
