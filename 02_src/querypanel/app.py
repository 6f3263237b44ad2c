"""Application bootstrap and lifecycle management."""

import os
from datetime import datetime, timedelta, timezone
from typing import Protocol

from .config import resolve_server_url
from .controller import PanelController
from .logging_config import get_logger
from .models import DisplayMode, Period
from .query import HttpQueryService, IQueryService
from .state import PanelState, Store
from .tracing import TracingAggregator

logger = get_logger(__name__)

DEFAULT_PERIOD = timedelta(hours=1)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...

    async def reset(self) -> None:
        """Drop panel state and tracing history, then start again."""
        ...

    @property
    def controller(self) -> PanelController:
        """Panel controller instance."""
        ...


def default_state(server_url: str | None = None) -> PanelState:
    """Initial panel state: last hour, chart mode, no query."""
    end = datetime.now(timezone.utc)
    return PanelState(
        display_type=DisplayMode.CHART,
        period=Period(start=end - DEFAULT_PERIOD, end=end),
        server_url=resolve_server_url(server_url),
        tracing_enabled=os.getenv("QUERY_TRACING", "").lower() in ("1", "true", "yes"),
    )


class Application:
    """Wires store, query service, tracing aggregator and panel controller."""

    def __init__(
        self,
        server_url: str | None = None,
        query_service: IQueryService | None = None,
        initial_state: PanelState | None = None,
    ):
        self._server_url = server_url
        self._initial_state = initial_state
        self._external_service = query_service

        # Components (will be initialized in start())
        self._store: Store | None = None
        self._query_service: IQueryService | None = None
        self._aggregator: TracingAggregator | None = None
        self._controller: PanelController | None = None

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting application")

        # 1. Store (no dependencies)
        self._store = Store(self._initial_state or default_state(self._server_url))
        logger.info("Store initialized at %s", self._store.state.server_url)

        # 2. Query service (no internal dependencies)
        self._query_service = self._external_service or HttpQueryService()

        # 3. TracingAggregator (reads tracing flag from Store)
        store = self._store
        self._aggregator = TracingAggregator(lambda: store.state.tracing_enabled)

        # 4. PanelController (depends on all of the above)
        self._controller = PanelController(
            store=self._store,
            query_service=self._query_service,
            aggregator=self._aggregator,
        )
        await self._controller.start()
        logger.info("All components initialized successfully")

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        if self._controller is not None:
            await self._controller.stop()
        if self._external_service is None and isinstance(
            self._query_service, HttpQueryService
        ):
            await self._query_service.close()
            logger.info("Query service closed")

    async def reset(self) -> None:
        """Drop panel state and tracing history, then start again."""
        await self.stop()
        await self.start()
        logger.info("Reset complete")

    @property
    def store(self) -> Store:
        """Get store instance."""
        if self._store is None:
            raise RuntimeError("Application not started")
        return self._store

    @property
    def controller(self) -> PanelController:
        """Get panel controller instance."""
        if self._controller is None:
            raise RuntimeError("Application not started")
        return self._controller

    @property
    def aggregator(self) -> TracingAggregator:
        """Get tracing aggregator instance."""
        if self._aggregator is None:
            raise RuntimeError("Application not started")
        return self._aggregator
