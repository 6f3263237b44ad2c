"""HTTP API for the query panel."""

from .app import create_fastapi_app

__all__ = ["create_fastapi_app"]
