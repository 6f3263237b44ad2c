"""Query panel core."""

from .app import Application, IApplication
from .controller import IPanelController, PanelController
from .models import (
    AxisLimits,
    AxisRange,
    CustomStep,
    DisplayMode,
    FetchState,
    Period,
    QueryResultBundle,
    TraceRecord,
)
from .query import HttpQueryService, IQueryService, QueryRequest
from .state import Action, ActionType, IStore, PanelState, Slice, Store
from .tracing import TracingAggregator
from .views import PanelView, ViewInputs, select_view

__all__ = [
    # Application
    "Application",
    "IApplication",
    # Models
    "DisplayMode",
    "Period",
    "AxisRange",
    "AxisLimits",
    "CustomStep",
    "FetchState",
    "QueryResultBundle",
    "TraceRecord",
    # State
    "Action",
    "ActionType",
    "IStore",
    "PanelState",
    "Slice",
    "Store",
    # Components
    "IQueryService",
    "HttpQueryService",
    "QueryRequest",
    "TracingAggregator",
    "IPanelController",
    "PanelController",
    "PanelView",
    "ViewInputs",
    "select_view",
]
