# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Administrative user management endpoints."""

from collections.abc import Mapping
from typing import Any

from ...core.base_client import BaseApiClient
from ...types.request import ResponseType


class AdminUsersClient(BaseApiClient):
    async def get_users(
        self, filters: Mapping[str, Any] | None = None, **options: Any
    ) -> Any:
        return await self._get("/admin/users", params=filters, **options)

    async def get_user_by_id(self, user_id: str, **options: Any) -> Any:
        return await self._get(f"/admin/users/{user_id}", **options)

    async def create_user(self, data: dict[str, Any], **options: Any) -> Any:
        return await self._post("/admin/users", data, **options)

    async def update_user(self, user_id: str, data: dict[str, Any], **options: Any) -> Any:
        return await self._put(f"/admin/users/{user_id}", data, **options)

    async def delete_user(self, user_id: str, **options: Any) -> None:
        await self._delete(f"/admin/users/{user_id}", **options)

    async def activate_user(self, user_id: str, **options: Any) -> Any:
        return await self._post(f"/admin/users/{user_id}/activate", {}, **options)

    async def deactivate_user(self, user_id: str, **options: Any) -> Any:
        return await self._post(f"/admin/users/{user_id}/deactivate", {}, **options)

    async def get_user_stats(self, **options: Any) -> Any:
        return await self._get("/admin/users/stats/overview", **options)

    async def reset_user_password(
        self, user_id: str, new_password: str, **options: Any
    ) -> Any:
        return await self._post(
            f"/admin/users/{user_id}/reset-password",
            {"newPassword": new_password},
            **options,
        )

    async def verify_user_email(self, user_id: str, **options: Any) -> Any:
        return await self._post(f"/admin/users/{user_id}/verify-email", {}, **options)

    async def revoke_user_sessions(self, user_id: str, **options: Any) -> Any:
        return await self._post(f"/admin/users/{user_id}/revoke-sessions", {}, **options)

    async def export_users(
        self,
        format: str = "json",
        filters: Mapping[str, Any] | None = None,
        **options: Any,
    ) -> Any:
        """Export users; CSV comes back as raw bytes, JSON decoded."""
        response_type = ResponseType.BYTES if format == "csv" else ResponseType.JSON
        return await self._get(
            f"/admin/users/export/{format}",
            params=filters,
            response_type=response_type,
            **options,
        )

    async def import_users(self, filename: str, file: Any, **options: Any) -> Any:
        return await self._upload(
            "/admin/users/import", files={"file": (filename, file)}, **options
        )


__all__ = ["AdminUsersClient"]
