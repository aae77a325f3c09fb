from __future__ import annotations

import logging

import typer

from ..api import create_app
from ..clients import FissionClients
from ..config import load_rest_config, load_settings
from ..transport import configure_transport
from .common import handle_cli_errors, resolve_namespace

logger = logging.getLogger(__name__)


def register(app: typer.Typer) -> None:
    app.command("serve")(serve)


@handle_cli_errors
def serve(
    ctx: typer.Context,
    host: str | None = typer.Option(None, help="Bind address (default FISSION_HOST or 0.0.0.0)."),
    port: int | None = typer.Option(None, help="Listen port (default FISSION_PORT or 8888)."),
) -> None:
    """Run the controller API in front of the object store."""

    import uvicorn

    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    rest_config = load_rest_config()
    rest_config.timeout = settings.timeout
    clients = FissionClients.for_namespace(
        configure_transport(rest_config), resolve_namespace(ctx)
    )
    bind_host = host or settings.host
    bind_port = port or settings.port
    logger.info(
        "Serving controller API on %s:%s for namespace %s", bind_host, bind_port, clients.namespace
    )
    try:
        uvicorn.run(create_app(clients), host=bind_host, port=bind_port, log_config=None)
    finally:
        clients.close()
