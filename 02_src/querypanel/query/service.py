"""Query execution service against a Prometheus-compatible HTTP API."""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

import httpx

from ..config import resolve_query_timeout
from ..logging_config import get_logger
from ..models import (
    DisplayMode,
    Period,
    QueryDescriptor,
    QueryResultBundle,
    TraceRecord,
)

logger = get_logger(__name__)


class ErrorTypes(str, Enum):
    """Validation messages reported before any request is made."""

    EMPTY_SERVER = "Please enter Server URL"
    VALID_SERVER = "Please provide a valid Server URL"
    VALID_QUERY = "Please enter a valid Query and execute it"


@dataclass(frozen=True)
class QueryRequest:
    """Everything needed to execute the panel's query once."""

    server_url: str
    query: QueryDescriptor
    period: Period
    step: float
    display_mode: DisplayMode
    tracing_enabled: bool = False
    nocache: bool = False
    visible: bool = True

    @property
    def expressions(self) -> list[str]:
        """Non-blank query expressions."""
        return [q for q in self.query if q.strip()]


class IQueryService(Protocol):
    """Executes a query request and returns a completed result bundle."""

    async def execute(self, request: QueryRequest) -> QueryResultBundle:
        """Run the request. Query errors come back in bundle.error."""
        ...


def validate_request(request: QueryRequest) -> str | None:
    """Return a validation error message, or None if the request can run."""
    if not request.server_url:
        return ErrorTypes.EMPTY_SERVER.value
    if not request.expressions:
        return ErrorTypes.VALID_QUERY.value
    if not request.server_url.startswith(("http://", "https://")):
        return ErrorTypes.VALID_SERVER.value
    return None


class HttpQueryService:
    """Fetches range and instant results for every expression of a request."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout if timeout is not None else resolve_query_timeout()
        )

    async def close(self) -> None:
        """Close the HTTP client if this service created it."""
        if self._owns_client:
            await self._client.aclose()

    async def execute(self, request: QueryRequest) -> QueryResultBundle:
        error = validate_request(request)
        if error:
            return QueryResultBundle.failed(error)

        # Trace only the endpoint whose data the current mode displays
        is_chart = request.display_mode is DisplayMode.CHART
        trace_range = request.tracing_enabled and is_chart
        trace_instant = request.tracing_enabled and not is_chart

        calls = []
        for expr in request.expressions:
            range_params = self._range_params(request, expr, trace_range)
            instant_params = self._instant_params(request, expr, trace_instant)
            calls.append(self._get(request, "query_range", range_params))
            calls.append(self._get(request, "query", instant_params))
        responses = await asyncio.gather(*calls)

        graph_data: list[dict[str, Any]] = []
        live_data: list[dict[str, Any]] = []
        trace_record: TraceRecord | None = None

        for group, expr in enumerate(request.expressions, start=1):
            range_resp, instant_resp = responses[2 * group - 2 : 2 * group]
            for resp in (range_resp, instant_resp):
                error = _error_message(resp)
                if error:
                    logger.info("Query failed: %s", error.replace("\r\n", " "))
                    return QueryResultBundle.failed(error)

            range_body = range_resp.json()
            instant_body = instant_resp.json()
            graph_data.extend(_tag_group(range_body, group))
            live_data.extend(_tag_group(instant_body, group))

            traced = range_body if trace_range else instant_body
            if request.tracing_enabled and traced.get("trace"):
                trace_record = TraceRecord.from_payload(traced["trace"], expr)

        return QueryResultBundle(
            live_data=live_data,
            graph_data=graph_data,
            trace_record=trace_record,
        )

    async def _get(
        self, request: QueryRequest, endpoint: str, params: dict[str, Any]
    ) -> httpx.Response:
        url = f"{request.server_url}/api/v1/{endpoint}"
        return await self._client.get(url, params=params)

    @staticmethod
    def _range_params(request: QueryRequest, expr: str, trace: bool) -> dict[str, Any]:
        params: dict[str, Any] = {
            "query": expr,
            "start": int(request.period.start.timestamp()),
            "end": int(request.period.end.timestamp()),
            "step": _format_step(request.step),
        }
        if request.nocache:
            params["nocache"] = 1
        if trace:
            params["trace"] = 1
        return params

    @staticmethod
    def _instant_params(request: QueryRequest, expr: str, trace: bool) -> dict[str, Any]:
        params: dict[str, Any] = {
            "query": expr,
            "time": int(request.period.end.timestamp()),
            "step": _format_step(request.step),
        }
        if trace:
            params["trace"] = 1
        return params


def _format_step(step: float) -> str:
    """Step as the server expects it, e.g. '15s' or '0.5s'."""
    return f"{int(step)}s" if float(step).is_integer() else f"{step}s"


def _error_message(response: httpx.Response) -> str | None:
    """Error text of a failed response, or None on success."""
    if response.is_success:
        return None
    try:
        body = response.json()
    except ValueError:
        return f"{response.status_code}\r\n{response.text}"
    return f"{body.get('errorType', response.status_code)}\r\n{body.get('error', '')}"


def _tag_group(body: dict[str, Any], group: int) -> list[dict[str, Any]]:
    """Series of a response body, each marked with its 1-based query index."""
    result = body.get("data", {}).get("result", [])
    return [{**series, "group": group} for series in result]
