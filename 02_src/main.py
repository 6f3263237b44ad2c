"""Main entry point for the query panel service."""

import os
from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from querypanel.api import create_fastapi_app
from querypanel.app import Application
from querypanel.logging_config import setup_logging


def main():
    """Run the application."""
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")
    setup_logging()

    # Get configuration from environment
    api_host = os.getenv("API_HOST", "localhost")
    api_port = int(os.getenv("API_PORT", "8000"))

    app = create_fastapi_app(Application())

    uvicorn.run(
        app,
        host=api_host,
        port=api_port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
