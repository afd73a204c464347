"""Pytest configuration and fixtures."""

from unittest.mock import AsyncMock

import pytest
from aioresponses import aioresponses

from moodrelay.client import BackendClient
from moodrelay.config import BackendClientConfig

BASE_URL = "http://backend.test"


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sleep():
    """Backoff sleep that returns immediately and records delays."""
    return AsyncMock(return_value=None)


@pytest.fixture
def config():
    return BackendClientConfig(base_url=BASE_URL)


@pytest.fixture
async def client(config, sleep, clock):
    client = BackendClient(config=config, sleep=sleep, clock=clock)
    await client.connect()
    try:
        yield client
    finally:
        await client.close()


@pytest.fixture
def backend():
    """Mocked backend; unmatched URLs fail as connection errors."""
    with aioresponses() as m:
        yield m
