"""Query tracing data models."""

import uuid
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class TraceRecord:
    """Timing breakdown of one query execution, as reported by the server."""

    message: str
    duration_msec: float
    query: str
    children: tuple["TraceRecord", ...] = ()
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @classmethod
    def from_payload(cls, data: dict[str, Any], query: str) -> "TraceRecord":
        """Build a record tree from the `trace` object of a query response."""
        return cls(
            message=data.get("message", ""),
            duration_msec=float(data.get("duration_msec", 0)),
            query=query,
            children=tuple(
                cls.from_payload(child, query) for child in data.get("children") or []
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize the record tree for display."""
        return {
            "id": self.id,
            "query": self.query,
            "message": self.message,
            "duration_msec": self.duration_msec,
            "children": [child.to_dict() for child in self.children],
        }
