# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Per-user rate limit endpoints."""

from typing import Any

from ..core.base_client import BaseApiClient


class UserRateLimitClient(BaseApiClient):
    async def create_user_rate_limit(self, data: dict[str, Any], **options: Any) -> Any:
        return await self._post("/auth/user-rate-limits", data, **options)

    async def get_user_rate_limits(self, user_id: str | None = None, **options: Any) -> Any:
        return await self._get(
            "/auth/user-rate-limits", params={"userId": user_id}, **options
        )

    async def update_user_rate_limit(
        self, limit_id: str, data: dict[str, Any], **options: Any
    ) -> Any:
        return await self._put(f"/auth/user-rate-limits/{limit_id}", data, **options)

    async def delete_user_rate_limit(self, limit_id: str, **options: Any) -> None:
        await self._delete(f"/auth/user-rate-limits/{limit_id}", **options)

    async def get_user_rate_limit_stats(self, **options: Any) -> Any:
        return await self._get("/auth/user-rate-limits/stats", **options)

    async def check_rate_limit_status(
        self, endpoint: str, method: str | None = None, **options: Any
    ) -> Any:
        return await self._get(
            f"/auth/user-rate-limits/status/{endpoint}",
            params={"method": method},
            **options,
        )

    async def clear_rate_limit_counters(
        self, user_id: str | None = None, **options: Any
    ) -> Any:
        body = {} if user_id is None else {"userId": user_id}
        return await self._post("/auth/user-rate-limits/clear", body, **options)


__all__ = ["UserRateLimitClient"]
