# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
OAuth login and account-linking endpoints.

A successful callback hands the access token to ``on_access_token``, the
same way AuthClient does after a password login.
"""

import logging
from collections.abc import Callable, Mapping
from typing import Any

from ..core.base_client import BaseApiClient

logger = logging.getLogger(__name__)

OAUTH_PROVIDERS = ("google", "github", "microsoft")


class OAuthClient(BaseApiClient):
    def __init__(
        self,
        *args: Any,
        on_access_token: Callable[[str | None], None] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self._on_access_token = on_access_token or self.set_access_token

    async def authorize(self, provider: str, **options: Any) -> Any:
        """Return the provider authorization URL."""
        return await self._get(f"/auth/oauth/authorize/{provider}", **options)

    async def callback(self, data: Mapping[str, Any], **options: Any) -> Any:
        """Exchange the provider ``code``/``state`` for an API session."""
        response = await self._get("/auth/oauth/callback", params=data, **options)
        if isinstance(response, dict) and response.get("accessToken"):
            self._on_access_token(response["accessToken"])
            logger.info("OAuth login completed, access token applied")
        return response

    async def link_account(self, data: dict[str, Any], **options: Any) -> Any:
        return await self._post("/auth/oauth/link", data, **options)

    async def unlink_account(self, provider: str, **options: Any) -> None:
        await self._delete(f"/auth/oauth/{provider}/unlink", **options)

    async def get_linked_accounts(self, **options: Any) -> Any:
        return await self._get("/auth/oauth/accounts", **options)


__all__ = ["OAUTH_PROVIDERS", "OAuthClient"]
