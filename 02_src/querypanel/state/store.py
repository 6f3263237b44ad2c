"""Shared state store with per-slice subscriptions."""

import asyncio
from enum import Enum
from typing import Awaitable, Callable, Protocol

from ..logging_config import get_logger
from .reducer import Action, PanelState, reduce

logger = get_logger(__name__)


class Slice(str, Enum):
    """Independently observable parts of PanelState."""

    DISPLAY_TYPE = "display_type"
    PERIOD = "period"
    QUERY = "query"
    SERVER_URL = "server_url"
    TRACING_ENABLED = "tracing_enabled"
    NOCACHE = "nocache"
    CUSTOM_STEP = "custom_step"
    YAXIS = "yaxis"


StateHandler = Callable[[PanelState, PanelState], Awaitable[None]]


class IStore(Protocol):
    """Owner of shared panel state. Mutated only via dispatched actions."""

    @property
    def state(self) -> PanelState:
        """Current state snapshot."""
        ...

    def subscribe(self, slices: list[Slice], handler: StateHandler) -> None:
        """Call handler(old, new) whenever any of the slices changes."""
        ...

    async def dispatch(self, action: Action) -> None:
        """Apply an action and notify subscribers of changed slices."""
        ...


class Store:
    """In-memory store; notifies subscribers of changed slices only."""

    def __init__(self, initial: PanelState | None = None):
        self._state = initial or PanelState()
        self._subscribers: dict[Slice, list[StateHandler]] = {s: [] for s in Slice}

    @property
    def state(self) -> PanelState:
        return self._state

    def subscribe(self, slices: list[Slice], handler: StateHandler) -> None:
        """Call handler(old, new) whenever any of the slices changes."""
        for state_slice in slices:
            self._subscribers[state_slice].append(handler)

    async def dispatch(self, action: Action) -> None:
        """Apply an action and notify subscribers of changed slices."""
        old = self._state
        new = reduce(old, action)
        self._state = new

        changed = [s for s in Slice if getattr(old, s.value) != getattr(new, s.value)]
        if not changed:
            return
        logger.debug("Dispatched %s, changed slices: %s", action.type.value, changed)

        # One call per handler even if it watches several changed slices
        handlers: list[StateHandler] = []
        for state_slice in changed:
            for handler in self._subscribers[state_slice]:
                if handler not in handlers:
                    handlers.append(handler)

        if handlers:
            results = await asyncio.gather(
                *[handler(old, new) for handler in handlers],
                return_exceptions=True,
            )

            for i, result in enumerate(results):
                if isinstance(result, Exception):
                    logger.error("Error in state handler %s: %s", i, result)
