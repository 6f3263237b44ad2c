"""View selection module."""

from .selector import (
    MAIN_VIEW_BUILDERS,
    TRACING_EMPTY_MESSAGE,
    ChartView,
    CodeView,
    MainView,
    PanelView,
    TableView,
    TracingView,
    ViewInputs,
    select_view,
)

__all__ = [
    "MAIN_VIEW_BUILDERS",
    "TRACING_EMPTY_MESSAGE",
    "ChartView",
    "CodeView",
    "MainView",
    "PanelView",
    "TableView",
    "TracingView",
    "ViewInputs",
    "select_view",
]
