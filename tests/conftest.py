"""Shared test fixtures."""

import fnmatch

import pytest
import pytest_asyncio

from recall.adapters.memory import MemoryAdapter
from recall.core.config import Settings
from recall.services.engine import CacheEngine


class FakeClock:
    """Manually advanced monotonic clock (seconds)."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms / 1000


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings(monkeypatch):
    for var in ("RECALL_ADAPTER", "RECALL_DEFAULT_TTL", "RECALL_SWEEP_INTERVAL"):
        monkeypatch.delenv(var, raising=False)
    return Settings(default_ttl=1_000, sweep_interval=50, _env_file=None)


@pytest.fixture
def store(clock):
    return MemoryAdapter(default_ttl=1_000, clock=clock)


@pytest_asyncio.fixture
async def engine(settings):
    engine = CacheEngine(settings)
    await engine.startup()
    yield engine
    await engine.shutdown()


@pytest_asyncio.fixture
async def cache(engine):
    return engine.client()


class FakeRedis:
    """Just enough of redis.asyncio.Redis for the adapter."""

    def __init__(self, fail: bool = False):
        self.data = {}
        self.px = {}
        self.fail = fail
        self.closed = False

    def _check(self):
        if self.fail:
            raise ConnectionError("connection refused")

    async def ping(self):
        self._check()
        return True

    async def get(self, key):
        self._check()
        return self.data.get(key)

    async def set(self, key, value, px=None):
        self._check()
        self.data[key] = value
        self.px[key] = px
        return True

    async def delete(self, *keys):
        self._check()
        return sum(1 for k in keys if self.data.pop(k, None) is not None)

    async def scan_iter(self, match=None):
        self._check()
        for key in list(self.data):
            if match is None or fnmatch.fnmatchcase(key, match):
                yield key

    async def aclose(self):
        self.closed = True


@pytest.fixture
def fake_redis():
    return FakeRedis()
