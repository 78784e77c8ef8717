# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""API key management endpoints (creation, rotation, restrictions)."""

from datetime import datetime
from typing import Any

from ..core.base_client import BaseApiClient


class ApiKeyClient(BaseApiClient):
    async def list_api_keys(self, **options: Any) -> Any:
        return await self._get("/auth/api-keys", **options)

    async def get_api_key_by_id(self, key_id: str, **options: Any) -> Any:
        return await self._get(f"/auth/api-keys/{key_id}", **options)

    async def create_api_key(self, data: dict[str, Any], **options: Any) -> Any:
        return await self._post("/auth/api-keys", data, **options)

    async def delete_api_key(self, key_id: str, **options: Any) -> None:
        await self._delete(f"/auth/api-keys/{key_id}", **options)

    async def revoke_api_key(
        self, key_id: str, reason: str | None = None, **options: Any
    ) -> None:
        await self._post(f"/auth/api-keys/{key_id}/revoke", {"reason": reason}, **options)

    async def rotate_api_key(
        self, key_id: str, reason: str | None = None, **options: Any
    ) -> Any:
        return await self._post(
            f"/auth/api-keys/{key_id}/rotate", {"reason": reason}, **options
        )

    async def rotate_bulk(self, data: dict[str, Any], **options: Any) -> Any:
        return await self._post("/auth/api-keys/rotate-bulk", data, **options)

    async def set_expiration(
        self, key_id: str, expires_at: datetime, **options: Any
    ) -> Any:
        return await self._post(
            f"/auth/api-keys/{key_id}/expire",
            {"expiresAt": expires_at.isoformat()},
            **options,
        )

    async def get_usage_stats(self, key_id: str | None = None, **options: Any) -> Any:
        path = (
            f"/auth/api-keys/{key_id}/usage-stats"
            if key_id
            else "/auth/api-keys/usage-stats"
        )
        return await self._get(path, **options)

    async def get_keys_needing_rotation(self, **options: Any) -> Any:
        return await self._get("/auth/api-keys/rotation-needed", **options)

    async def get_rotation_history(self, key_id: str | None = None, **options: Any) -> Any:
        return await self._get(
            "/auth/api-keys/rotation-history", params={"keyId": key_id}, **options
        )

    async def update_permissions(
        self, key_id: str, permissions: list[str], **options: Any
    ) -> Any:
        return await self._put(
            f"/auth/api-keys/{key_id}/permissions", {"permissions": permissions}, **options
        )

    async def update_rate_limit(self, key_id: str, rate_limit: int, **options: Any) -> Any:
        return await self._put(
            f"/auth/api-keys/{key_id}/rate-limit", {"rateLimit": rate_limit}, **options
        )

    async def update_allowed_ips(
        self, key_id: str, allowed_ips: list[str], **options: Any
    ) -> Any:
        return await self._put(
            f"/auth/api-keys/{key_id}/allowed-ips", {"allowedIps": allowed_ips}, **options
        )

    async def clone_api_key(self, key_id: str, new_name: str, **options: Any) -> Any:
        return await self._post(
            f"/auth/api-keys/{key_id}/clone", {"name": new_name}, **options
        )

    async def test_api_key(self, key: str, **options: Any) -> Any:
        return await self._post("/auth/api-keys/test", {"key": key}, **options)


__all__ = ["ApiKeyClient"]
