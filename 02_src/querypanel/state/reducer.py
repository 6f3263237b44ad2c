"""Shared panel state and the reducer that applies actions to it."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any

from ..models import (
    AxisLimits,
    AxisRange,
    CustomStep,
    DisplayMode,
    Period,
    QueryDescriptor,
)


class ActionType(str, Enum):
    """Mutation requests accepted by the store."""

    SET_DISPLAY_TYPE = "SET_DISPLAY_TYPE"
    SET_PERIOD = "SET_PERIOD"
    SET_QUERY = "SET_QUERY"
    SET_CUSTOM_STEP = "SET_CUSTOM_STEP"
    SET_SERVER = "SET_SERVER"
    TOGGLE_QUERY_TRACING = "TOGGLE_QUERY_TRACING"
    SET_QUERY_TRACING = "SET_QUERY_TRACING"
    TOGGLE_NO_CACHE = "TOGGLE_NO_CACHE"
    SET_YAXIS_LIMITS = "SET_YAXIS_LIMITS"
    TOGGLE_ENABLE_YAXIS_LIMITS = "TOGGLE_ENABLE_YAXIS_LIMITS"


@dataclass(frozen=True)
class Action:
    """A typed mutation request."""

    type: ActionType
    payload: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PanelState:
    """Everything the panel reads from shared application state."""

    display_type: DisplayMode = DisplayMode.CHART
    period: Period | None = None
    query: QueryDescriptor = ()
    server_url: str = ""
    tracing_enabled: bool = False
    nocache: bool = False
    custom_step: CustomStep = field(default_factory=CustomStep)
    yaxis: AxisLimits = field(default_factory=AxisLimits)


def reduce(state: PanelState, action: Action) -> PanelState:
    """Return the state that results from applying an action."""
    payload = action.payload

    if action.type is ActionType.SET_DISPLAY_TYPE:
        return replace(state, display_type=DisplayMode(payload["display_type"]))

    if action.type is ActionType.SET_PERIOD:
        start: datetime = payload["start"]
        end: datetime = payload["end"]
        if end < start:
            raise ValueError("Period end precedes start")
        return replace(state, period=Period(start=start, end=end))

    if action.type is ActionType.SET_QUERY:
        return replace(state, query=tuple(payload["query"]))

    if action.type is ActionType.SET_CUSTOM_STEP:
        value = float(payload.get("value", state.custom_step.value))
        if value <= 0:
            raise ValueError("Please enter positive number")
        return replace(
            state,
            custom_step=CustomStep(
                enabled=bool(payload.get("enabled", state.custom_step.enabled)),
                value=value,
            ),
        )

    if action.type is ActionType.SET_SERVER:
        return replace(state, server_url=payload["server_url"])

    if action.type is ActionType.TOGGLE_QUERY_TRACING:
        return replace(state, tracing_enabled=not state.tracing_enabled)

    if action.type is ActionType.SET_QUERY_TRACING:
        return replace(state, tracing_enabled=bool(payload["enabled"]))

    if action.type is ActionType.TOGGLE_NO_CACHE:
        return replace(state, nocache=not state.nocache)

    if action.type is ActionType.SET_YAXIS_LIMITS:
        return replace(
            state,
            yaxis=replace(
                state.yaxis,
                range=AxisRange(min=payload.get("min"), max=payload.get("max")),
            ),
        )

    if action.type is ActionType.TOGGLE_ENABLE_YAXIS_LIMITS:
        return replace(state, yaxis=replace(state.yaxis, enabled=not state.yaxis.enabled))

    raise ValueError(f"Unknown action type: {action.type}")
