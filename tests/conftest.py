import pytest
from fastapi.testclient import TestClient

import fakeredis
import fakeredis.aioredis

from doughformula import deps
from doughformula.infra import redis_client
from doughformula.infra.kv_store import MemoryStore
from doughformula.main import app


@pytest.fixture(autouse=True)
def mock_redis(monkeypatch):
    server = fakeredis.FakeServer()
    # Create fake clients sharing the same server
    async_redis = fakeredis.aioredis.FakeRedis(server=server, decode_responses=True)
    sync_redis = fakeredis.FakeRedis(server=server, decode_responses=True)

    # Force the clients into the infra module
    redis_client._redis_async = async_redis
    redis_client._redis_sync = sync_redis

    yield sync_redis

    # Cleanup
    redis_client._redis_async = None
    redis_client._redis_sync = None


@pytest.fixture(autouse=True)
def fresh_timer():
    """Each test gets its own process timer."""
    deps.reset_timer()
    yield
    deps.reset_timer()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def store():
    return MemoryStore()


class FakeClock:
    """Epoch-ms clock that only moves when told to."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class ManualHandle:
    def __init__(self, scheduler, callback):
        self.scheduler = scheduler
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """Records periodic callbacks; tests fire them with run_ticks()."""

    def __init__(self):
        self.handles: list[ManualHandle] = []

    def call_every(self, interval, callback):
        handle = ManualHandle(self, callback)
        self.handles.append(handle)
        return handle

    @property
    def active(self):
        return [h for h in self.handles if not h.cancelled]

    def run_ticks(self, count: int = 1, clock: FakeClock = None, step_ms: int = 1000):
        for _ in range(count):
            if clock is not None:
                clock.advance(step_ms)
            for handle in self.active:
                handle.callback()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler():
    return ManualScheduler()
