"""Query result data models."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .tracing import TraceRecord


class FetchState(str, Enum):
    """Lifecycle state of the panel's fetch."""

    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass(frozen=True)
class QueryResultBundle:
    """Outcome of one query execution."""

    is_loading: bool = False
    live_data: list[dict[str, Any]] | None = None  # instant query series
    graph_data: list[dict[str, Any]] | None = None  # range query series
    error: str | None = None
    trace_record: TraceRecord | None = None

    @classmethod
    def failed(cls, error: str) -> "QueryResultBundle":
        """Bundle carrying only an error message."""
        return cls(error=error)
