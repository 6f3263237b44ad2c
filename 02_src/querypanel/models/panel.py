"""Panel configuration data models."""

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

# Upper bound on points per series when no custom step is set
MAX_POINTS_PER_SERIES = 1000


class DisplayMode(str, Enum):
    """Visualization mode of the panel."""

    CHART = "chart"
    TABLE = "table"
    CODE = "code"


@dataclass(frozen=True)
class Period:
    """Visible time window of the panel."""

    start: datetime
    end: datetime

    @property
    def duration_seconds(self) -> float:
        """Length of the window in seconds."""
        return (self.end - self.start).total_seconds()

    @property
    def default_step(self) -> int:
        """Step in seconds used when no custom step is enabled."""
        return max(1, math.ceil(self.duration_seconds / MAX_POINTS_PER_SERIES))


@dataclass(frozen=True)
class AxisRange:
    """Y-axis bounds. None means the bound is unset."""

    min: float | None = None
    max: float | None = None


@dataclass(frozen=True)
class AxisLimits:
    """Y-axis range plus the flag that applies it."""

    enabled: bool = False
    range: AxisRange = field(default_factory=AxisRange)


@dataclass(frozen=True)
class CustomStep:
    """User-chosen query step in seconds."""

    enabled: bool = False
    value: float = 1.0

    def resolve(self, period: Period) -> float:
        """Effective step for a period."""
        if self.enabled:
            return self.value
        return period.default_step


QueryDescriptor = tuple[str, ...]
