"""Pytest configuration and fixtures."""

import asyncio
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from querypanel.models import DisplayMode, Period, QueryResultBundle, TraceRecord  # noqa: E402
from querypanel.state import PanelState  # noqa: E402

PERIOD = Period(
    start=datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc),
    end=datetime(2024, 1, 1, 13, 0, 0, tzinfo=timezone.utc),
)


class FakeQueryService:
    """Query service whose executions are resolved by the test."""

    def __init__(self, default: QueryResultBundle | None = None):
        self.default = default
        self.requests = []
        self._pending: list[asyncio.Future] = []

    async def execute(self, request):
        self.requests.append(request)
        if self.default is not None:
            return self.default
        future = asyncio.get_running_loop().create_future()
        self._pending.append(future)
        return await future

    async def wait_for_requests(self, count: int) -> None:
        """Let scheduled fetch tasks run until `count` requests arrived."""
        for _ in range(100):
            if len(self.requests) >= count:
                return
            await asyncio.sleep(0)
        raise AssertionError(f"expected {count} requests, got {len(self.requests)}")

    def resolve(self, index: int, bundle: QueryResultBundle) -> None:
        """Complete request `index`; ignored if it was cancelled."""
        future = self._pending[index]
        if not future.done():
            future.set_result(bundle)

    def fail(self, index: int, exc: Exception) -> None:
        future = self._pending[index]
        if not future.done():
            future.set_exception(exc)


def make_trace(message: str, duration: float = 1.0) -> TraceRecord:
    return TraceRecord(message=message, duration_msec=duration, query="up")


@pytest.fixture
def initial_state():
    """Chart panel over a fixed hour, one query."""
    return PanelState(
        display_type=DisplayMode.CHART,
        period=PERIOD,
        query=("up",),
        server_url="http://vm:8428",
        tracing_enabled=True,
    )


@pytest.fixture
def store(initial_state):
    """Create Store with the initial state."""
    from querypanel.state import Store

    return Store(initial_state)


@pytest.fixture
def query_service():
    """Create a query service resolved by hand."""
    return FakeQueryService()


@pytest_asyncio.fixture
async def controller(store, query_service):
    """Create a started PanelController (its initial fetch is request 0)."""
    from querypanel.controller import PanelController

    pc = PanelController(store=store, query_service=query_service)
    await pc.start()
    await query_service.wait_for_requests(1)
    yield pc
    await pc.stop()
