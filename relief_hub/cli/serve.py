"""Serve mode: run the relief API with uvicorn."""

import typer
import uvicorn

from relief_hub.config import API_HOST, API_PORT, DATABASE_URL, LOG_LEVEL
from relief_hub.db import init_db
from relief_hub.utils.logger import configure_logging

from .shared import console, logger


def serve(
    host: str = typer.Option(API_HOST, "--host", "-h", help="Bind host"),
    port: int = typer.Option(API_PORT, "--port", "-p", help="Port for the API server"),
    reload: bool = typer.Option(False, "--reload/--no-reload", help="Reload on code changes (development)"),
    log_level: str = typer.Option(LOG_LEVEL, "--log-level", help="Log level for app and server (DEBUG, INFO, ...)"),
) -> None:
    """Start the HTTP API."""
    configure_logging(log_level)
    init_db()
    log = logger.bind(command="serve", host=host, port=port)
    log.info("serve.start", database_url=DATABASE_URL.split("?")[0], log_level=log_level.upper())
    console.print(f"[green]Relief Hub API listening on http://{host}:{port}[/green] (health: /health, API: /api)")
    uvicorn.run(
        "relief_hub.api.server:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=log_level.lower(),
    )
