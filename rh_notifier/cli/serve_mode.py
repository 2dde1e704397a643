"""Serve mode: run the HTTP API with uvicorn."""

from typing import Optional

import typer
import uvicorn

from rh_notifier.api.server import create_app
from rh_notifier.config import API_PORT
from rh_notifier.whatsapp import get_provider

from .shared import console, logger


def serve(
    port: int = typer.Option(API_PORT, "--port", "-p", help="Port for the API server"),
    host: str = typer.Option("0.0.0.0", "--host", "-h", help="Bind host"),
    provider: Optional[str] = typer.Option(None, "--provider", help="fonnte | mock (default: WHATSAPP_PROVIDER)"),
) -> None:
    """Start the HTTP API (on-demand checks, contact updates, notifications)."""
    log = logger.bind(command="serve", port=port)
    app = create_app(provider=get_provider(provider))
    console.print(f"[dim]Serving on http://{host}:{port}[/dim]")
    log.info("serve.start")
    uvicorn.run(app, host=host, port=port)
