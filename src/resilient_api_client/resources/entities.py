# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Entity definitions and records.

Besides the ``/entities`` endpoints this covers the dynamic record routes
(``/<entity_name>``) that the API generates for every published entity.
"""

from collections.abc import Mapping
from typing import Any

from ..core.base_client import BaseApiClient

EXPORT_FORMATS = ("json", "csv", "excel")


class EntitiesClient(BaseApiClient):
    # === Entity definitions ===

    async def list_entities(
        self, filters: Mapping[str, Any] | None = None, **options: Any
    ) -> Any:
        return await self._get("/entities", params=filters, **options)

    async def get_entity(self, entity_id: str, **options: Any) -> Any:
        return await self._get(f"/entities/{entity_id}", **options)

    async def create_entity(self, data: dict[str, Any], **options: Any) -> Any:
        return await self._post("/entities", data, **options)

    async def update_entity(
        self, entity_id: str, data: dict[str, Any], **options: Any
    ) -> Any:
        return await self._put(f"/entities/{entity_id}", data, **options)

    async def delete_entity(self, entity_id: str, **options: Any) -> None:
        await self._delete(f"/entities/{entity_id}", **options)

    async def get_entity_schema(self, entity_id: str, **options: Any) -> Any:
        return await self._get(f"/entities/{entity_id}/schema", **options)

    async def validate_entity_schema(self, schema: Any, **options: Any) -> Any:
        return await self._post("/entities/validate-schema", {"schema": schema}, **options)

    # === Entity records ===

    async def list_entity_records(
        self, entity_id: str, params: Mapping[str, Any] | None = None, **options: Any
    ) -> Any:
        return await self._get(f"/entities/{entity_id}/records", params=params, **options)

    async def get_entity_record(self, entity_id: str, record_id: str, **options: Any) -> Any:
        return await self._get(f"/entities/{entity_id}/records/{record_id}", **options)

    async def create_entity_record(
        self, entity_id: str, data: dict[str, Any], **options: Any
    ) -> Any:
        return await self._post(f"/entities/{entity_id}/records", data, **options)

    async def update_entity_record(
        self, entity_id: str, record_id: str, data: dict[str, Any], **options: Any
    ) -> Any:
        return await self._put(f"/entities/{entity_id}/records/{record_id}", data, **options)

    async def delete_entity_record(
        self, entity_id: str, record_id: str, **options: Any
    ) -> None:
        await self._delete(f"/entities/{entity_id}/records/{record_id}", **options)

    # === Dynamic records ===

    async def list_dynamic_records(
        self, entity_name: str, params: Mapping[str, Any] | None = None, **options: Any
    ) -> Any:
        return await self._get(f"/{entity_name}", params=params, **options)

    async def get_dynamic_record(self, entity_name: str, record_id: str, **options: Any) -> Any:
        return await self._get(f"/{entity_name}/{record_id}", **options)

    async def create_dynamic_record(
        self, entity_name: str, data: dict[str, Any], **options: Any
    ) -> Any:
        return await self._post(f"/{entity_name}", data, **options)

    async def update_dynamic_record(
        self, entity_name: str, record_id: str, data: dict[str, Any], **options: Any
    ) -> Any:
        return await self._put(f"/{entity_name}/{record_id}", data, **options)

    async def delete_dynamic_record(
        self, entity_name: str, record_id: str, **options: Any
    ) -> None:
        await self._delete(f"/{entity_name}/{record_id}", **options)

    async def bulk_create_dynamic_records(
        self, entity_name: str, records: list[dict[str, Any]], **options: Any
    ) -> Any:
        return await self._post(f"/{entity_name}/bulk", {"records": records}, **options)

    async def validate_dynamic_data(
        self, entity_name: str, data: dict[str, Any], **options: Any
    ) -> Any:
        return await self._post(f"/{entity_name}/validate", data, **options)

    # === Import / export ===

    async def export_entity_data(
        self, entity_id: str, format: str = "json", **options: Any
    ) -> bytes:
        if format not in EXPORT_FORMATS:
            raise ValueError(f"format must be one of {EXPORT_FORMATS}, got {format!r}")
        return await self._download(
            f"/entities/{entity_id}/export", params={"format": format}, **options
        )

    async def import_entity_data(
        self, entity_id: str, filename: str, file: Any, **options: Any
    ) -> Any:
        return await self._upload(
            f"/entities/{entity_id}/import", files={"file": (filename, file)}, **options
        )


__all__ = ["EXPORT_FORMATS", "EntitiesClient"]
