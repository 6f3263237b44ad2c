"""Query execution module."""

from .service import (
    ErrorTypes,
    HttpQueryService,
    IQueryService,
    QueryRequest,
    validate_request,
)

__all__ = [
    "ErrorTypes",
    "HttpQueryService",
    "IQueryService",
    "QueryRequest",
    "validate_request",
]
