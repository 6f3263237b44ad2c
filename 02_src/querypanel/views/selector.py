"""Selection of the views a panel mounts for its current state.

The selector is a pure function. Rendering belongs to whatever consumes the
returned PanelView: it only says which views are mounted and with what data.
"""

from dataclasses import dataclass, field
from typing import Any, Callable

from ..models import (
    AxisLimits,
    CustomStep,
    DisplayMode,
    Period,
    QueryDescriptor,
    QueryResultBundle,
    TraceRecord,
)

TRACING_EMPTY_MESSAGE = "Please re-run the query to see results of the tracing"

# Modes that can show the tracing view
TRACING_MODES = frozenset({DisplayMode.CHART, DisplayMode.TABLE})


@dataclass(frozen=True)
class ChartView:
    """Time-series chart over the panel period."""

    data: list[dict[str, Any]]
    period: Period
    custom_step: CustomStep
    query: QueryDescriptor
    yaxis: AxisLimits
    kind: DisplayMode = field(default=DisplayMode.CHART, init=False)


@dataclass(frozen=True)
class TableView:
    """Instant query results as rows."""

    data: list[dict[str, Any]]
    kind: DisplayMode = field(default=DisplayMode.TABLE, init=False)


@dataclass(frozen=True)
class CodeView:
    """Instant query results as raw JSON."""

    data: list[dict[str, Any]]
    kind: DisplayMode = field(default=DisplayMode.CODE, init=False)


MainView = ChartView | TableView | CodeView


@dataclass(frozen=True)
class TracingView:
    """Accumulated trace records, shown above the main view."""

    records: list[TraceRecord]
    empty_message: str = TRACING_EMPTY_MESSAGE

    @property
    def is_empty(self) -> bool:
        return not self.records


@dataclass(frozen=True)
class PanelView:
    """Everything mounted in the panel body."""

    loading: bool = False
    error: str | None = None
    main: MainView | None = None
    tracing: TracingView | None = None
    show_tracing_button: bool = False
    show_graph_settings: bool = False


@dataclass(frozen=True)
class ViewInputs:
    """Read-only inputs of the selector."""

    display_mode: DisplayMode
    bundle: QueryResultBundle
    period: Period | None
    tracing_enabled: bool
    tracing_visible: bool
    tracing_history: list[TraceRecord]
    custom_step: CustomStep = field(default_factory=CustomStep)
    query: QueryDescriptor = ()
    yaxis: AxisLimits = field(default_factory=AxisLimits)


def _chart(inputs: ViewInputs) -> ChartView | None:
    if inputs.bundle.graph_data is None or inputs.period is None:
        return None
    return ChartView(
        data=inputs.bundle.graph_data,
        period=inputs.period,
        custom_step=inputs.custom_step,
        query=inputs.query,
        yaxis=inputs.yaxis,
    )


def _table(inputs: ViewInputs) -> TableView | None:
    if inputs.bundle.live_data is None:
        return None
    return TableView(data=inputs.bundle.live_data)


def _code(inputs: ViewInputs) -> CodeView | None:
    if inputs.bundle.live_data is None:
        return None
    return CodeView(data=inputs.bundle.live_data)


MAIN_VIEW_BUILDERS: dict[DisplayMode, Callable[[ViewInputs], MainView | None]] = {
    DisplayMode.CHART: _chart,
    DisplayMode.TABLE: _table,
    DisplayMode.CODE: _code,
}

if set(MAIN_VIEW_BUILDERS) != set(DisplayMode):
    raise RuntimeError("Every display mode needs a main view builder")


def select_view(inputs: ViewInputs) -> PanelView:
    """Pick the views to mount for the given panel state."""
    mode = inputs.display_mode
    main = MAIN_VIEW_BUILDERS[mode](inputs)

    tracing = None
    use_tracing = inputs.tracing_enabled and inputs.tracing_visible
    if use_tracing and mode in TRACING_MODES and main is not None:
        tracing = TracingView(records=list(inputs.tracing_history))

    return PanelView(
        loading=inputs.bundle.is_loading,
        error=inputs.bundle.error,
        main=main,
        tracing=tracing,
        show_tracing_button=inputs.tracing_enabled and mode in TRACING_MODES,
        show_graph_settings=mode is DisplayMode.CHART,
    )
