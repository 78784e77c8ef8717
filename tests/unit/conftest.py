# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Shared fixtures for unit tests: scripted httpx transports and fake clocks."""

import random
from collections.abc import Callable, Iterable
from typing import Any

import httpx
import pytest

from resilient_api_client.config import ClientConfig, RetryPolicy
from resilient_api_client.credentials.store import CredentialStore
from resilient_api_client.dispatcher import Dispatcher
from resilient_api_client.retry import RetryController

BASE_URL = "http://api.test/api/v1"

Reply = httpx.Response | Exception | Callable[[httpx.Request], httpx.Response]


class FakeClock:
    """Manually advanced epoch clock."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ScriptedTransport:
    """
    Replays a fixed list of replies and records every request it sees.

    Each reply is an ``httpx.Response``, an exception to raise, or a callable
    taking the request. The last reply repeats once the script runs out.
    """

    def __init__(self, replies: Iterable[Reply]) -> None:
        self.replies = list(replies)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        index = min(len(self.requests) - 1, len(self.replies) - 1)
        reply = self.replies[index]
        if isinstance(reply, Exception):
            raise reply
        if callable(reply) and not isinstance(reply, httpx.Response):
            return reply(request)
        return reply

    @property
    def calls(self) -> int:
        return len(self.requests)

    def client(self, base_url: str = BASE_URL) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=base_url, transport=httpx.MockTransport(self)
        )


def json_response(status: int, body: Any = None, **kwargs: Any) -> httpx.Response:
    if body is None:
        return httpx.Response(status, **kwargs)
    return httpx.Response(status, json=body, **kwargs)


class SleepRecorder:
    """Stand-in for asyncio.sleep that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sleep():
    return SleepRecorder()


@pytest.fixture
def config():
    return ClientConfig(base_url=BASE_URL)


@pytest.fixture
def fast_config():
    """Config whose retries never wait."""
    return ClientConfig(
        base_url=BASE_URL, retry=RetryPolicy(base_delay=0.0, jitter_max=0.0)
    )


@pytest.fixture
def make_dispatcher(config, clock, sleep):
    """Build a Dispatcher over a scripted transport."""
    created: list[httpx.AsyncClient] = []

    def _make(
        replies: Iterable[Reply],
        policy: RetryPolicy | None = None,
        store: CredentialStore | None = None,
        **kwargs: Any,
    ) -> tuple[Dispatcher, ScriptedTransport]:
        transport = ScriptedTransport(replies)
        http_client = transport.client()
        created.append(http_client)
        retry = RetryController(policy or config.retry, rng=random.Random(42))
        dispatcher = Dispatcher(
            http_client,
            store or CredentialStore(clock=clock),
            config,
            retry=retry,
            sleep=sleep,
            **kwargs,
        )
        return dispatcher, transport

    return _make
