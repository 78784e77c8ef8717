# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Administrative rate limit rule endpoints."""

from typing import Any

from ...core.base_client import BaseApiClient


class AdminRateLimitClient(BaseApiClient):
    async def get_rate_limits(self, **options: Any) -> Any:
        return await self._get("/admin/rate-limits", **options)

    async def get_rate_limit_by_name(self, name: str, **options: Any) -> Any:
        return await self._get(f"/admin/rate-limits/{name}", **options)

    async def create_rate_limit(self, data: dict[str, Any], **options: Any) -> Any:
        return await self._post("/admin/rate-limits", data, **options)

    async def update_rate_limit(self, name: str, data: dict[str, Any], **options: Any) -> Any:
        return await self._put(f"/admin/rate-limits/{name}", data, **options)

    async def delete_rate_limit(self, name: str, **options: Any) -> None:
        await self._delete(f"/admin/rate-limits/{name}", **options)

    async def reload_rate_limits(self, **options: Any) -> Any:
        return await self._post("/admin/rate-limits/reload", {}, **options)

    async def test_rate_limit(
        self, endpoint: str, method: str | None = None, **options: Any
    ) -> Any:
        return await self._post(
            "/admin/rate-limits/test", {"endpoint": endpoint, "method": method}, **options
        )

    async def get_rate_limit_stats(self, **options: Any) -> Any:
        return await self._get("/admin/rate-limits/stats", **options)


__all__ = ["AdminRateLimitClient"]
