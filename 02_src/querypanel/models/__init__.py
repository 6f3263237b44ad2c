"""Core data models for the query panel."""

from .panel import (
    AxisLimits,
    AxisRange,
    CustomStep,
    DisplayMode,
    Period,
    QueryDescriptor,
)
from .results import FetchState, QueryResultBundle
from .tracing import TraceRecord

__all__ = [
    # Panel
    "DisplayMode",
    "Period",
    "AxisRange",
    "AxisLimits",
    "CustomStep",
    "QueryDescriptor",
    # Results
    "FetchState",
    "QueryResultBundle",
    # Tracing
    "TraceRecord",
]
