"""
Pytest fixtures for TaskHub tests.
"""

import os

import pytest
from httpx import ASGITransport, AsyncClient

# Ensure test config is set before importing taskhub modules.
os.environ.setdefault("TASKHUB_ENV", "development")
os.environ.setdefault(
    "TASKHUB_DATABASE_URL",
    os.getenv("TASKHUB_TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:"),
)
os.environ.setdefault("TASKHUB_SEED_DEMO_DATA", "false")

from taskhub.db.base import Base, build_engine, build_session_factory
import taskhub.db.tables  # noqa: F401
from taskhub.observability.metrics import metrics
from taskhub.realtime.gateway import BroadcastGateway


class FakeSocket:
    """Collects everything the gateway sends to one client."""

    def __init__(self):
        self.sent: list[dict] = []
        self.closed = False
        self.close_code = None

    async def send_json(self, data, mode="text"):
        self.sent.append(data)

    async def close(self, code=1000, reason=None):
        self.closed = True
        self.close_code = code

    @property
    def events(self) -> list[str]:
        return [message["event"] for message in self.sent]

    def data_for(self, event: str) -> list[dict]:
        return [m["data"] for m in self.sent if m["event"] == event]


@pytest.fixture(autouse=True)
def reset_metrics():
    metrics.reset()
    yield


@pytest.fixture
async def engine():
    """Fresh in-memory SQLite database per test."""
    engine = build_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session(engine):
    """Provide a database session per test."""
    session_factory = build_session_factory(engine)
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def gateway():
    """Broadcast gateway with short timeouts, closed after the test."""
    gateway = BroadcastGateway(queue_size=64, send_timeout_seconds=0.5)
    yield gateway
    await gateway.close()


@pytest.fixture
async def subscriber(gateway):
    """A connected client whose ``Connected`` greeting has already been consumed."""
    socket = FakeSocket()
    gateway.connect(socket)
    await gateway.drain()
    socket.sent.clear()
    return socket


@pytest.fixture
async def client(session, gateway):
    """Async test client with overridden dependencies."""
    from taskhub.api.deps import get_db_session, get_gateway
    from taskhub.main import app

    async def override_get_db_session():
        yield session

    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_gateway] = lambda: gateway

    # Unhandled errors are rendered as 500 envelopes instead of re-raised
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
