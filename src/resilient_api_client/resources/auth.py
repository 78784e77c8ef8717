# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Authentication endpoints.

Login, registration and refresh hand the returned access token to the
``on_access_token`` callback. Inside a composed ApiClient that callback is
the root's broadcasting ``set_access_token``, so a login on ``client.auth``
authenticates every sub-client.
"""

import logging
from collections.abc import Callable
from typing import Any

from ..core.base_client import BaseApiClient
from ..exceptions import ApiClientError

logger = logging.getLogger(__name__)


class AuthClient(BaseApiClient):
    """Login, logout, token refresh and profile endpoints."""

    def __init__(
        self,
        *args: Any,
        on_access_token: Callable[[str | None], None] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self._on_access_token = on_access_token or self.set_access_token
        self.refresh_token: str | None = None

    def _apply_auth_response(self, response: Any) -> None:
        if not isinstance(response, dict):
            return
        if response.get("refreshToken"):
            self.refresh_token = response["refreshToken"]
        if response.get("accessToken"):
            self._on_access_token(response["accessToken"])
            logger.info("Authenticated, access token applied")

    async def login(self, credentials: dict[str, Any], **options: Any) -> Any:
        response = await self._post("/auth/login", credentials, **options)
        self._apply_auth_response(response)
        return response

    async def register(self, data: dict[str, Any], **options: Any) -> Any:
        response = await self._post("/auth/register", data, **options)
        self._apply_auth_response(response)
        return response

    async def logout(self, **options: Any) -> None:
        """Log out; the local token is dropped even if the call fails."""
        try:
            await self._post("/auth/logout", **options)
        finally:
            self.refresh_token = None
            self._on_access_token(None)
            logger.info("Logged out, access token cleared")

    async def refresh(self, refresh_token: str | None = None, **options: Any) -> Any:
        """Exchange a refresh token (the last one received by default)."""
        token = refresh_token or self.refresh_token
        if not token:
            raise ApiClientError("No refresh token available")
        response = await self._post("/auth/refresh", {"refreshToken": token}, **options)
        self._apply_auth_response(response)
        return response

    async def get_profile(self, **options: Any) -> Any:
        return await self._get("/auth/profile", **options)

    async def update_profile(self, data: dict[str, Any], **options: Any) -> Any:
        return await self._put("/auth/profile", data, **options)

    async def change_password(
        self, current_password: str, new_password: str, **options: Any
    ) -> None:
        await self._post(
            "/auth/change-password",
            {"currentPassword": current_password, "newPassword": new_password},
            **options,
        )

    async def request_password_reset(self, email: str, **options: Any) -> None:
        await self._post("/auth/forgot-password", {"email": email}, **options)

    async def reset_password(self, token: str, new_password: str, **options: Any) -> None:
        await self._post(
            "/auth/reset-password",
            {"token": token, "newPassword": new_password},
            **options,
        )

    async def verify_email(self, token: str, **options: Any) -> None:
        await self._post("/auth/verify-email", {"token": token}, **options)

    async def validate_token(self, **options: Any) -> bool:
        """True when the server accepts the current credentials."""
        try:
            await self._get("/auth/validate", **options)
        except ApiClientError:
            return False
        return True


__all__ = ["AuthClient"]
