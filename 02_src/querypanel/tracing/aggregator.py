"""TracingAggregator implementation."""

from typing import Callable

from ..logging_config import get_logger
from ..models import TraceRecord

logger = get_logger(__name__)


class TracingAggregator:
    """Ordered history of trace records for the panel's current query."""

    def __init__(self, is_enabled: Callable[[], bool]):
        self._is_enabled = is_enabled
        self._history: list[TraceRecord] = []

    def append(self, record: TraceRecord) -> None:
        """Add a record to the end of the history, unless tracing is off."""
        if not self._is_enabled():
            logger.debug("Tracing disabled, dropping trace record %s", record.id)
            return
        self._history.append(record)

    def reset(self) -> None:
        """Empty the history."""
        self._history.clear()

    def snapshot(self) -> list[TraceRecord]:
        """Copy of the history in completion order."""
        return self._history.copy()

    def __len__(self) -> int:
        return len(self._history)
