# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Tests for the composed ApiClient: broadcast, invalidation and persistence."""

import dataclasses
import random
from unittest.mock import Mock

import httpx
import pytest
from conftest import BASE_URL, FakeClock, ScriptedTransport, json_response

from resilient_api_client import ApiClient, CredentialPhase
from resilient_api_client.config import ClientConfig
from resilient_api_client.exceptions import (
    ConfigurationError,
    CredentialSyncError,
    HttpError,
    ProblemDetailError,
    StorageOperationError,
)
from resilient_api_client.storage import MemoryTokenStorage, StoredSession
from resilient_api_client.types.credentials import CredentialState

LOGIN_BODY = {"accessToken": "tok-1", "refreshToken": "ref-1", "user": {"id": "u1"}}


def route(request: httpx.Request) -> httpx.Response:
    path = request.url.path
    if path.endswith("/auth/login"):
        return json_response(200, LOGIN_BODY)
    if path.endswith("/auth/refresh"):
        return json_response(200, {"accessToken": "tok-2"})
    if path.endswith("/auth/oauth/callback"):
        return json_response(200, {"accessToken": "tok-oauth", "provider": "github"})
    if path.endswith("/admin/users/gone"):
        return json_response(401, {"message": "Unauthorized"})
    return json_response(200, {"ok": True, "auth": request.headers.get("Authorization")})


@pytest.fixture
def transport():
    return ScriptedTransport([route])


@pytest.fixture
def api(transport, fast_config, clock):
    return ApiClient(
        fast_config,
        http_client=transport.client(),
        rng=random.Random(0),
        clock=clock,
    )


def tokens(api: ApiClient) -> dict[str, str | None]:
    return {name: member.get_access_token() for name, member in api.members}


class TestComposition:
    def test_registry_order(self, api):
        assert [name for name, _ in api.members] == [
            "auth",
            "mfa",
            "oauth",
            "sessions",
            "uploads",
            "api_keys",
            "user_rate_limits",
            "entities",
            "admin.users",
            "admin.rate_limits",
            "admin.security",
        ]

    def test_members_share_transport_and_config(self, api):
        for _, member in api.members:
            assert member.http_client is api.http_client
            assert member.config is api.config
            assert member.dispatcher.retry is api.dispatcher.retry

    def test_members_have_separate_stores(self, api):
        stores = {id(member.credentials) for _, member in api.members}
        stores.add(id(api.credentials))
        assert len(stores) == len(api.members) + 1


class TestBroadcast:
    def test_set_access_token_reaches_every_member(self, api):
        api.set_access_token("tok")

        assert api.get_access_token() == "tok"
        assert set(tokens(api).values()) == {"tok"}

    def test_set_api_key_reaches_every_member(self, api):
        api.set_api_key("key")

        assert all(member.get_api_key() == "key" for _, member in api.members)

    def test_clear_credentials(self, api):
        api.set_access_token("tok")
        api.set_api_key("key")

        api.clear_credentials()

        assert api.get_access_token() is None
        assert set(tokens(api).values()) == {None}
        assert all(member.get_api_key() is None for _, member in api.members)

    def test_failing_member_does_not_stop_broadcast(self, api):
        api.admin.users.set_access_token = Mock(side_effect=RuntimeError("boom"))

        with pytest.raises(CredentialSyncError) as exc_info:
            api.set_access_token("tok")

        assert [name for name, _ in exc_info.value.failures] == ["admin.users"]
        assert api.get_access_token() == "tok"
        assert api.auth.get_access_token() == "tok"
        assert api.admin.security.get_access_token() == "tok"

    def test_session_duration_broadcast(self, api):
        api.set_session_duration(60)

        assert api.credentials.session_duration == 60
        assert all(m.credentials.session_duration == 60 for _, m in api.members)


class TestLoginFlow:
    @pytest.mark.asyncio
    async def test_login_authenticates_every_member(self, api, transport):
        response = await api.auth.login({"email": "a@example.com", "password": "pw"})

        assert response == LOGIN_BODY
        assert api.get_access_token() == "tok-1"
        assert set(tokens(api).values()) == {"tok-1"}
        assert api.auth.refresh_token == "ref-1"

        result = await api.entities.list_entities()
        assert result["auth"] == "Bearer tok-1"

    @pytest.mark.asyncio
    async def test_refresh_uses_stored_refresh_token(self, api, transport):
        await api.auth.login({"email": "a@example.com", "password": "pw"})

        await api.auth.refresh()

        assert transport.requests[-1].url.path.endswith("/auth/refresh")
        assert b"ref-1" in transport.requests[-1].content
        assert set(tokens(api).values()) == {"tok-2"}

    @pytest.mark.asyncio
    async def test_oauth_callback_authenticates_every_member(self, api, transport):
        await api.oauth.callback({"code": "c-1", "state": "s-1"})

        assert transport.requests[-1].url.params["code"] == "c-1"
        assert api.get_access_token() == "tok-oauth"
        assert set(tokens(api).values()) == {"tok-oauth"}

    @pytest.mark.asyncio
    async def test_sub_client_activity_reaches_root(self, api, clock):
        api.set_access_token("tok")
        clock.advance(30)

        await api.entities.list_entities()

        assert api.credentials.snapshot().last_activity_at == clock.now
        assert api.entities.credentials.snapshot().last_activity_at == clock.now
        assert api.sessions.credentials.snapshot().last_activity_at == clock.now - 30

    @pytest.mark.asyncio
    async def test_logout_clears_everywhere(self, api):
        await api.auth.login({"email": "a@example.com", "password": "pw"})

        await api.auth.logout()

        assert api.get_access_token() is None
        assert set(tokens(api).values()) == {None}
        assert api.auth.refresh_token is None


class TestUnauthorized:
    @pytest.mark.asyncio
    async def test_401_on_one_member_invalidates_all(self, api):
        await api.auth.login({"email": "a@example.com", "password": "pw"})
        api.set_api_key("key")

        with pytest.raises(HttpError) as exc_info:
            await api.admin.users.get_user_by_id("gone")

        assert exc_info.value.status_code == 401
        assert api.state is CredentialPhase.UNAUTHENTICATED
        assert set(tokens(api).values()) == {None}
        assert all(member.get_api_key() is None for _, member in api.members)
        assert api.auth.refresh_token is None

    @pytest.mark.asyncio
    async def test_problem_detail_401_also_invalidates(self, fast_config, clock):
        problem = {"type": "about:blank", "title": "Unauthorized", "status": 401}
        transport = ScriptedTransport([json_response(401, problem)])
        api = ApiClient(fast_config, http_client=transport.client(), clock=clock)
        api.set_access_token("tok")

        with pytest.raises(ProblemDetailError) as exc_info:
            await api.sessions.get_sessions()

        assert exc_info.value.to_dict() == problem
        assert set(tokens(api).values()) == {None}

    @pytest.mark.asyncio
    async def test_403_keeps_session(self, fast_config, clock):
        transport = ScriptedTransport([json_response(403, {"message": "Forbidden"})])
        api = ApiClient(fast_config, http_client=transport.client(), clock=clock)
        api.set_access_token("tok")

        with pytest.raises(HttpError):
            await api.admin.security.get_all_settings()

        assert set(tokens(api).values()) == {"tok"}


class TestState:
    def test_phases(self, api, clock):
        assert api.state is CredentialPhase.UNAUTHENTICATED

        api.set_access_token("tok")
        assert api.state is CredentialPhase.AUTHENTICATED

        clock.advance(api.config.session_duration + 1)
        assert api.state is CredentialPhase.EXPIRED
        assert api.get_access_token() is None
        assert api.state is CredentialPhase.UNAUTHENTICATED

    def test_api_key_alone_is_unauthenticated(self, api):
        api.set_api_key("key")
        assert api.state is CredentialPhase.UNAUTHENTICATED


class TestFactories:
    @pytest.mark.asyncio
    async def test_create_splits_config_and_client_kwargs(self, clock):
        api = ApiClient.create("https://api.example.com/api/v1/", timeout=5.0, clock=clock)

        assert api.config.base_url == "https://api.example.com/api/v1"
        assert api.config.timeout == 5.0
        api.set_access_token("tok")
        assert api.credentials.snapshot().last_activity_at == clock.now
        await api.aclose()

    @pytest.mark.asyncio
    async def test_from_env(self, monkeypatch):
        monkeypatch.setenv("API_URL", "https://env.example.com/api/v1")
        monkeypatch.setenv("API_SESSION_DURATION", "120")

        api = ApiClient.from_env(with_credentials=True)

        assert api.config.base_url == "https://env.example.com/api/v1"
        assert api.config.with_credentials is True
        assert all(m.credentials.session_duration == 120 for _, m in api.members)
        await api.aclose()

    def test_create_rejects_bad_url(self):
        with pytest.raises(ConfigurationError):
            ApiClient.create("localhost:3000")


class TestPersistence:
    @pytest.fixture
    def storage(self, clock):
        return MemoryTokenStorage(clock=clock)

    @pytest.fixture
    def make_api(self, fast_config, clock, storage):
        def _make():
            transport = ScriptedTransport([route])
            return ApiClient(
                fast_config,
                http_client=transport.client(),
                token_storage=storage,
                clock=clock,
            )

        return _make

    @pytest.mark.asyncio
    async def test_persist_and_restore(self, make_api):
        first = make_api()
        await first.auth.login({"email": "a@example.com", "password": "pw"})
        first.set_api_key("key")
        await first.persist_session()

        second = make_api()
        assert await second.restore_session() is True

        assert second.state is CredentialPhase.AUTHENTICATED
        assert set(tokens(second).values()) == {"tok-1"}
        assert all(m.get_api_key() == "key" for _, m in second.members)
        assert second.auth.refresh_token == "ref-1"
        assert second.remaining_session_time() == first.remaining_session_time()

    @pytest.mark.asyncio
    async def test_restore_without_session(self, make_api):
        assert await make_api().restore_session() is False

    @pytest.mark.asyncio
    async def test_expired_session_discarded(self, make_api, storage, clock):
        session = StoredSession(
            access_token="old",
            session_expires_at=clock.now - 10,
            last_activity_at=clock.now - 100,
            saved_at=clock.now - 100,
        )
        await storage.set("session", session.model_dump_json())

        api = make_api()
        assert await api.restore_session() is False
        assert api.get_access_token() is None
        assert await storage.get("session") is None

    @pytest.mark.asyncio
    async def test_persisted_duration_restored(self, make_api):
        first = make_api()
        first.set_session_duration(600)
        first.set_access_token("tok")
        await first.persist_session()

        second = make_api()
        await second.restore_session()

        assert all(m.credentials.session_duration == 600 for _, m in second.members)

    @pytest.mark.asyncio
    async def test_persist_after_session_expired_mid_request(
        self, fast_config, clock, storage
    ):
        """A call that finishes after the deadline leaves a persistable state."""

        def slow(request: httpx.Request) -> httpx.Response:
            clock.advance(120)
            return json_response(200, {})

        api = ApiClient(
            dataclasses.replace(fast_config, session_duration=60),
            http_client=ScriptedTransport([slow]).client(),
            token_storage=storage,
            clock=clock,
        )
        api.set_access_token("T")
        started = clock.now

        await api._get("/x")
        await api.persist_session()

        snapshot = api.credentials.snapshot()
        assert snapshot.last_activity_at == started
        assert snapshot.session_expires_at == started + 60

        second = ApiClient(
            fast_config,
            http_client=ScriptedTransport([route]).client(),
            token_storage=storage,
            clock=clock,
        )
        assert await second.restore_session() is False

    @pytest.mark.asyncio
    async def test_inconsistent_state_raises_storage_error(self, make_api, clock):
        api = make_api()
        api.credentials.restore(
            CredentialState(
                access_token="t",
                session_expires_at=clock.now,
                last_activity_at=clock.now + 10,
            )
        )

        with pytest.raises(StorageOperationError) as exc_info:
            await api.persist_session()

        assert exc_info.value.__cause__ is not None

    @pytest.mark.asyncio
    async def test_forget_session(self, make_api, storage):
        api = make_api()
        api.set_access_token("tok")
        await api.persist_session()

        await api.forget_session()

        assert await storage.load_session() is None
        assert api.get_access_token() == "tok"

    @pytest.mark.asyncio
    async def test_requires_storage(self, api):
        with pytest.raises(ConfigurationError):
            await api.persist_session()
        with pytest.raises(ConfigurationError):
            await api.restore_session()

    @pytest.mark.asyncio
    async def test_aclose_closes_storage(self, fast_config):
        storage = Mock(spec=MemoryTokenStorage)
        api = ApiClient(fast_config, token_storage=storage)

        await api.aclose()

        storage.close.assert_awaited_once()
        assert api.http_client.is_closed


def test_fake_clock_shared_default():
    clock = FakeClock()
    api = ApiClient(ClientConfig(base_url=BASE_URL), clock=clock)
    api.set_access_token("tok")
    assert api.admin.users.credentials.snapshot().session_expires_at == (
        clock.now + api.config.session_duration
    )
