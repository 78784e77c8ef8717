# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Administrative security settings endpoints."""

from typing import Any

from ...core.base_client import BaseApiClient

SETTINGS_PATH = "/admin/security-settings"


class SecuritySettingsClient(BaseApiClient):
    async def get_categories(self, **options: Any) -> Any:
        return await self._get(f"{SETTINGS_PATH}/categories", **options)

    async def get_definitions(self, **options: Any) -> Any:
        return await self._get(f"{SETTINGS_PATH}/definitions", **options)

    async def get_all_settings(self, **options: Any) -> Any:
        return await self._get(f"{SETTINGS_PATH}/all", **options)

    async def get_settings_by_category(self, category: str, **options: Any) -> Any:
        return await self._get(f"{SETTINGS_PATH}/category/{category}", **options)

    async def get_setting(self, key: str, **options: Any) -> Any:
        return await self._get(f"{SETTINGS_PATH}/{key}", **options)

    async def update_setting(self, key: str, value: Any, **options: Any) -> Any:
        return await self._put(f"{SETTINGS_PATH}/{key}", {"value": value}, **options)

    async def update_multiple_settings(
        self, settings: dict[str, Any], **options: Any
    ) -> Any:
        return await self._put(SETTINGS_PATH, {"settings": settings}, **options)

    async def reset_setting(self, key: str, **options: Any) -> Any:
        return await self._post(f"{SETTINGS_PATH}/{key}/reset", {}, **options)

    async def test_validation(self, **options: Any) -> Any:
        return await self._get(f"{SETTINGS_PATH}/validation/test", **options)

    async def export_settings(self, **options: Any) -> Any:
        return await self._get(f"{SETTINGS_PATH}/export/json", **options)

    async def import_settings(self, settings: dict[str, Any], **options: Any) -> Any:
        return await self._post(
            f"{SETTINGS_PATH}/import/json", {"settings": settings}, **options
        )


__all__ = ["SETTINGS_PATH", "SecuritySettingsClient"]
