"""Observability API routes."""

from typing import Any

from pydantic import BaseModel
from fastapi import APIRouter

from ...app import IApplication


class TraceRecordResponse(BaseModel):
    """Response model for a trace record tree."""

    id: str
    query: str
    message: str
    duration_msec: float
    children: list[dict[str, Any]]


class TracesResponse(BaseModel):
    """Accumulated tracing history."""

    tracing_enabled: bool
    tracing_visible: bool
    records: list[TraceRecordResponse]


def create_observability_router(app: IApplication) -> APIRouter:
    """Create observability router."""
    router = APIRouter(prefix="/api", tags=["observability"])

    @router.get("/traces", response_model=TracesResponse)
    async def get_traces() -> dict:
        """Get the tracing history in completion order."""
        controller = app.controller
        return {
            "tracing_enabled": controller.state.tracing_enabled,
            "tracing_visible": controller.tracing_visible,
            "records": [r.to_dict() for r in controller.tracing_history],
        }

    return router
