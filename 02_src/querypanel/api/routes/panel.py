"""Panel API routes."""

from dataclasses import asdict
from datetime import datetime
from typing import Any

from pydantic import BaseModel
from fastapi import APIRouter, HTTPException, Query

from ...app import IApplication
from ...models import DisplayMode
from ...views import PanelView


class DisplayTypeRequest(BaseModel):
    """Request model for switching display mode."""

    display_type: DisplayMode


class PeriodRequest(BaseModel):
    """Request model for the visible time window."""

    start: datetime
    end: datetime


class QueryUpdateRequest(BaseModel):
    """Request model for the panel's query expressions."""

    query: list[str]


class StepRequest(BaseModel):
    """Request model for a custom step in seconds."""

    enabled: bool
    value: float


class YaxisLimitsRequest(BaseModel):
    """Request model for y-axis bounds."""

    min: float | None = None
    max: float | None = None


class TracingRequest(BaseModel):
    """Request model for the tracing capability flag."""

    enabled: bool


class ViewResponse(BaseModel):
    """Views mounted in the panel body."""

    loading: bool
    error: str | None
    main: dict[str, Any] | None
    tracing: dict[str, Any] | None
    show_tracing_button: bool
    show_graph_settings: bool


class PanelResponse(BaseModel):
    """Response model for the panel."""

    display_type: DisplayMode
    fetch_state: str
    period: dict[str, datetime] | None
    query: list[str]
    server_url: str
    tracing_enabled: bool
    tracing_visible: bool
    custom_step: dict[str, Any]
    yaxis: dict[str, Any]
    view: ViewResponse


def serialize_view(view: PanelView) -> dict[str, Any]:
    """Convert a PanelView into plain JSON-ready data."""
    main = None
    if view.main is not None:
        main = {"kind": view.main.kind.value, "data": view.main.data}
        if view.main.kind is DisplayMode.CHART:
            main["period"] = asdict(view.main.period)
            main["step"] = view.main.custom_step.resolve(view.main.period)
            main["yaxis"] = asdict(view.main.yaxis)

    tracing = None
    if view.tracing is not None:
        tracing = {
            "records": [r.to_dict() for r in view.tracing.records],
            "empty_message": view.tracing.empty_message if view.tracing.is_empty else None,
        }

    return {
        "loading": view.loading,
        "error": view.error,
        "main": main,
        "tracing": tracing,
        "show_tracing_button": view.show_tracing_button,
        "show_graph_settings": view.show_graph_settings,
    }


def create_panel_router(app: IApplication) -> APIRouter:
    """Create panel router."""
    router = APIRouter(prefix="/api/panel", tags=["panel"])

    def panel_response() -> dict:
        controller = app.controller
        state = controller.state
        return {
            "display_type": state.display_type,
            "fetch_state": controller.fetch_state.value,
            "period": asdict(state.period) if state.period else None,
            "query": list(state.query),
            "server_url": state.server_url,
            "tracing_enabled": state.tracing_enabled,
            "tracing_visible": controller.tracing_visible,
            "custom_step": asdict(state.custom_step),
            "yaxis": asdict(state.yaxis),
            "view": serialize_view(controller.view()),
        }

    @router.get("", response_model=PanelResponse)
    async def get_panel(
        wait: bool = Query(False, description="Wait for the outstanding fetch"),
    ) -> dict:
        """Get panel state and the views it mounts."""
        if wait:
            await app.controller.wait_for_fetch()
        return panel_response()

    @router.put("/display-type", response_model=PanelResponse)
    async def set_display_type(request: DisplayTypeRequest) -> dict:
        """Switch display mode. Clears tracing history."""
        await app.controller.set_display_mode(request.display_type)
        return panel_response()

    @router.put("/period", response_model=PanelResponse)
    async def set_period(request: PeriodRequest) -> dict:
        """Set the visible time window and re-run the query."""
        try:
            await app.controller.set_period(request.start, request.end)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return panel_response()

    @router.put("/query", response_model=PanelResponse)
    async def set_query(request: QueryUpdateRequest) -> dict:
        """Set query expressions and run them."""
        await app.controller.set_query(request.query)
        return panel_response()

    @router.put("/step", response_model=PanelResponse)
    async def set_step(request: StepRequest) -> dict:
        """Set a custom step."""
        try:
            await app.controller.set_custom_step(request.enabled, request.value)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return panel_response()

    @router.put("/yaxis/limits", response_model=PanelResponse)
    async def set_yaxis_limits(request: YaxisLimitsRequest) -> dict:
        """Set y-axis bounds."""
        await app.controller.set_axis_limits(request.min, request.max)
        return panel_response()

    @router.post("/yaxis/toggle", response_model=PanelResponse)
    async def toggle_yaxis_limits() -> dict:
        """Enable or disable y-axis bounds."""
        await app.controller.toggle_axis_limits_enabled()
        return panel_response()

    @router.put("/tracing", response_model=PanelResponse)
    async def set_tracing(request: TracingRequest) -> dict:
        """Enable or disable query tracing."""
        await app.controller.set_tracing_enabled(request.enabled)
        return panel_response()

    @router.post("/tracing/toggle-visibility", response_model=PanelResponse)
    async def toggle_tracing_visibility() -> dict:
        """Show or hide the tracing view."""
        app.controller.toggle_tracing_visibility()
        return panel_response()

    @router.post("/run", response_model=PanelResponse)
    async def run_query() -> dict:
        """Re-run the current query."""
        app.controller.run_query()
        return panel_response()

    return router
