"""PanelController implementation."""

import asyncio
from dataclasses import replace
from datetime import datetime
from typing import Protocol

from ..logging_config import get_logger, log_context
from ..models import (
    DisplayMode,
    FetchState,
    QueryResultBundle,
    TraceRecord,
)
from ..query import IQueryService, QueryRequest
from ..state import Action, ActionType, IStore, PanelState, Slice
from ..tracing import TracingAggregator
from ..views import PanelView, ViewInputs, select_view

logger = get_logger(__name__)

# Slices whose change makes the current result stale
QUERY_INPUT_SLICES = [Slice.QUERY, Slice.PERIOD, Slice.CUSTOM_STEP, Slice.SERVER_URL]


class IPanelController(Protocol):
    """Fetch lifecycle, tracing history and view selection of one panel."""

    async def start(self) -> None:
        """Subscribe to shared state and run the initial fetch."""
        ...

    async def stop(self) -> None:
        """Cancel any outstanding fetch."""
        ...

    async def set_period(self, start: datetime, end: datetime) -> None:
        """Request a new visible time window."""
        ...

    async def set_axis_limits(self, min: float | None, max: float | None) -> None:
        """Request new y-axis bounds. Never fetches."""
        ...

    async def toggle_axis_limits_enabled(self) -> None:
        """Request the y-axis limits flag to flip. Never fetches."""
        ...

    async def set_display_mode(self, mode: DisplayMode) -> None:
        """Request a display mode change."""
        ...

    def toggle_tracing_visibility(self) -> None:
        """Show or hide the tracing view."""
        ...

    def view(self) -> PanelView:
        """Views to mount for the current state."""
        ...


class PanelController:
    """Drives query execution for a panel and decides what it shows.

    Shared state is read from the store and changed only by dispatching
    actions to it. The controller reacts to store notifications:

    * query, period, step or server changes start a new fetch;
    * a display mode change clears tracing history and hides tracing;
    * disabling tracing clears history and hides tracing.

    Only the most recently started fetch may change the current bundle.
    """

    def __init__(
        self,
        store: IStore,
        query_service: IQueryService,
        aggregator: TracingAggregator | None = None,
        visible: bool = True,
    ):
        self._store = store
        self._query_service = query_service
        self._aggregator = (
            aggregator
            if aggregator is not None
            else TracingAggregator(lambda: self._store.state.tracing_enabled)
        )
        self._visible = visible

        self._bundle = QueryResultBundle()
        self._fetch_state = FetchState.IDLE
        self._tracing_visible = False

        self._generation = 0
        self._fetch_task: asyncio.Task | None = None
        self._started = False

    # Lifecycle

    async def start(self) -> None:
        """Subscribe to shared state and run the initial fetch."""
        if not self._started:
            self._store.subscribe(QUERY_INPUT_SLICES, self._on_query_inputs_changed)
            self._store.subscribe([Slice.DISPLAY_TYPE], self._on_display_type_changed)
            self._store.subscribe([Slice.TRACING_ENABLED], self._on_tracing_enabled_changed)
            self._started = True
        logger.info("Starting PanelController")
        self._fetch()

    async def stop(self) -> None:
        """Cancel any outstanding fetch."""
        logger.info("Stopping PanelController")
        # Invalidate whatever is in flight
        self._generation += 1
        task = self._fetch_task
        self._fetch_task = None
        if task and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        if self._fetch_state is FetchState.LOADING:
            self._bundle = replace(self._bundle, is_loading=False)
            self._fetch_state = FetchState.IDLE

    async def wait_for_fetch(self) -> None:
        """Wait until the most recently started fetch has been applied."""
        # A superseded task finishes as cancelled; keep waiting on its successor
        while self._fetch_task and not self._fetch_task.done():
            await asyncio.wait([self._fetch_task])

    # Mutation requests

    async def set_period(self, start: datetime, end: datetime) -> None:
        await self._store.dispatch(
            Action(ActionType.SET_PERIOD, {"start": start, "end": end})
        )

    async def set_axis_limits(self, min: float | None, max: float | None) -> None:
        await self._store.dispatch(
            Action(ActionType.SET_YAXIS_LIMITS, {"min": min, "max": max})
        )

    async def toggle_axis_limits_enabled(self) -> None:
        await self._store.dispatch(Action(ActionType.TOGGLE_ENABLE_YAXIS_LIMITS))

    async def set_display_mode(self, mode: DisplayMode) -> None:
        await self._store.dispatch(
            Action(ActionType.SET_DISPLAY_TYPE, {"display_type": mode})
        )

    async def set_query(self, query: list[str]) -> None:
        await self._store.dispatch(Action(ActionType.SET_QUERY, {"query": query}))

    async def set_custom_step(self, enabled: bool, value: float) -> None:
        await self._store.dispatch(
            Action(ActionType.SET_CUSTOM_STEP, {"enabled": enabled, "value": value})
        )

    async def set_tracing_enabled(self, enabled: bool) -> None:
        await self._store.dispatch(
            Action(ActionType.SET_QUERY_TRACING, {"enabled": enabled})
        )

    # Local state

    def toggle_tracing_visibility(self) -> None:
        """Show or hide the tracing view. Ignored while tracing is disabled."""
        if not self._store.state.tracing_enabled:
            return
        self._tracing_visible = not self._tracing_visible

    def set_visible(self, visible: bool) -> None:
        """Hidden panels do not fetch; becoming visible fetches."""
        was_visible = self._visible
        self._visible = visible
        if visible and not was_visible and self._started:
            self._fetch()

    def run_query(self) -> None:
        """Re-execute the current query."""
        self._fetch()

    # Read side

    @property
    def state(self) -> PanelState:
        return self._store.state

    @property
    def fetch_state(self) -> FetchState:
        return self._fetch_state

    @property
    def bundle(self) -> QueryResultBundle:
        return self._bundle

    @property
    def is_loading(self) -> bool:
        return self._bundle.is_loading

    @property
    def tracing_visible(self) -> bool:
        return self._tracing_visible

    @property
    def tracing_history(self) -> list[TraceRecord]:
        return self._aggregator.snapshot()

    def view(self) -> PanelView:
        state = self._store.state
        return select_view(
            ViewInputs(
                display_mode=state.display_type,
                bundle=self._bundle,
                period=state.period,
                tracing_enabled=state.tracing_enabled,
                tracing_visible=self._tracing_visible,
                tracing_history=self._aggregator.snapshot(),
                custom_step=state.custom_step,
                query=state.query,
                yaxis=state.yaxis,
            )
        )

    # Store subscribers

    async def _on_query_inputs_changed(self, old: PanelState, new: PanelState) -> None:
        self._fetch()

    async def _on_display_type_changed(self, old: PanelState, new: PanelState) -> None:
        logger.info(
            "Display type changed, clearing tracing history",
            extra=log_context(
                old=old.display_type.value,
                new=new.display_type.value,
                dropped_records=len(self._aggregator),
            ),
        )
        self._aggregator.reset()
        self._tracing_visible = False

    async def _on_tracing_enabled_changed(self, old: PanelState, new: PanelState) -> None:
        if new.tracing_enabled:
            logger.info("Query tracing enabled")
            return
        logger.info("Query tracing disabled, clearing tracing history")
        self._aggregator.reset()
        self._tracing_visible = False

    # Fetching

    def _build_request(self) -> QueryRequest | None:
        state = self._store.state
        if state.period is None:
            return None
        return QueryRequest(
            server_url=state.server_url,
            query=state.query,
            period=state.period,
            step=state.custom_step.resolve(state.period),
            display_mode=state.display_type,
            tracing_enabled=state.tracing_enabled,
            nocache=state.nocache,
            visible=self._visible,
        )

    def _fetch(self) -> None:
        """Start a fetch that supersedes any fetch in flight."""
        if not self._visible:
            return
        request = self._build_request()
        if request is None:
            return

        self._generation += 1
        generation = self._generation

        previous = self._fetch_task
        if previous and not previous.done():
            logger.debug("Superseding fetch %s", generation - 1)
            previous.cancel()

        self._bundle = replace(self._bundle, is_loading=True)
        self._fetch_state = FetchState.LOADING
        self._fetch_task = asyncio.create_task(self._run_fetch(generation, request))

    async def _run_fetch(self, generation: int, request: QueryRequest) -> None:
        try:
            bundle = await self._query_service.execute(request)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error("Query execution failed: %s", e, exc_info=True)
            bundle = QueryResultBundle.failed(f"{type(e).__name__}: {e}")
        self._complete(generation, bundle)

    def _complete(self, generation: int, bundle: QueryResultBundle) -> None:
        """Apply a finished fetch unless a newer one has started since."""
        if generation != self._generation:
            logger.debug("Discarding result of superseded fetch %s", generation)
            return

        if bundle.error:
            # Previous data stays mounted under the error banner
            self._bundle = replace(
                self._bundle, is_loading=False, error=bundle.error, trace_record=None
            )
            self._fetch_state = FetchState.FAILED
            logger.info(
                "Query failed",
                extra=log_context(generation=generation, error=bundle.error),
            )
            return

        self._bundle = replace(bundle, is_loading=False)
        self._fetch_state = FetchState.LOADED
        if bundle.trace_record is not None:
            self._aggregator.append(bundle.trace_record)
        logger.debug(
            "Query completed",
            extra=log_context(generation=generation, traces=len(self._aggregator)),
        )
