"""Project-level configuration and path helpers."""

import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_LOG_PATH = LOGS_DIR / "app.log"
DEFAULT_SERVER_URL = "http://localhost:8428"
DEFAULT_QUERY_TIMEOUT = 30.0


def resolve_server_url(env_value: str | None = None) -> str:
    """Resolve VM_SERVER_URL to a server URL without a trailing slash."""
    if env_value is None:
        env_value = os.getenv("VM_SERVER_URL", DEFAULT_SERVER_URL)
    return env_value.strip().rstrip("/")


def resolve_query_timeout(env_value: str | None = None) -> float:
    """Resolve QUERY_TIMEOUT (seconds) for the HTTP client."""
    if env_value is None:
        env_value = os.getenv("QUERY_TIMEOUT")
    if not env_value:
        return DEFAULT_QUERY_TIMEOUT
    return float(env_value)
