# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
File upload endpoints.

File arguments take anything ``httpx`` accepts as a multipart file body
(bytes, or a binary file object). Multipart encoding and its boundary
header are left to ``httpx``.
"""

import json
from collections.abc import Sequence
from typing import Any

from ..core.base_client import BaseApiClient

UPLOAD_CONTEXTS = ("avatar", "document", "general")


class FileUploadClient(BaseApiClient):
    async def upload_avatar(self, filename: str, file: Any, **options: Any) -> Any:
        return await self._upload(
            "/auth/uploads/avatar", files={"file": (filename, file)}, **options
        )

    async def upload_document(
        self,
        filename: str,
        file: Any,
        metadata: dict[str, Any] | None = None,
        **options: Any,
    ) -> Any:
        data = {"metadata": json.dumps(metadata)} if metadata else None
        return await self._upload(
            "/auth/uploads/documents",
            files={"file": (filename, file)},
            data=data,
            **options,
        )

    async def upload_multiple(
        self, files: Sequence[tuple[str, Any]], **options: Any
    ) -> Any:
        parts = [("files", (filename, file)) for filename, file in files]
        return await self._upload("/auth/uploads/multiple", files=parts, **options)

    async def get_upload_policy(self, context: str, **options: Any) -> Any:
        if context not in UPLOAD_CONTEXTS:
            raise ValueError(f"context must be one of {UPLOAD_CONTEXTS}, got {context!r}")
        return await self._get(f"/auth/uploads/upload-policy/{context}", **options)

    async def validate_file(self, data: dict[str, Any], **options: Any) -> Any:
        return await self._post("/auth/uploads/validate", data, **options)

    async def delete_file(self, file_key: str, **options: Any) -> None:
        await self._delete(f"/auth/uploads/{file_key}", **options)

    async def get_signed_url(
        self, file_key: str, expires_in: int | None = None, **options: Any
    ) -> Any:
        return await self._get(
            f"/auth/uploads/{file_key}/signed-url",
            params={"expiresIn": expires_in},
            **options,
        )


__all__ = ["UPLOAD_CONTEXTS", "FileUploadClient"]
