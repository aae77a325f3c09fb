from __future__ import annotations

import json
import os
from collections.abc import Callable
from functools import wraps
from pathlib import Path
from typing import Any, ParamSpec, TypeVar

import typer
from rich.console import Console

from ..clients import FissionClients
from ..config import load_rest_config, load_settings
from ..errors import ConfigurationError, FissionError
from ..transport import configure_transport

console = Console()


def _render_error(exc: FissionError) -> None:
    console.print(f"[red]Error:[/red] {exc.reason}: {exc.message}")
    details = getattr(exc, "details", None)
    if details:
        snippet = details
        if isinstance(details, dict):
            snippet = json.dumps(details, indent=2)
        console.print(str(snippet))


CommandParams = ParamSpec("CommandParams")
CommandReturn = TypeVar("CommandReturn")


def handle_cli_errors(
    func: Callable[CommandParams, CommandReturn],
) -> Callable[CommandParams, CommandReturn]:
    @wraps(func)
    def wrapper(*args: CommandParams.args, **kwargs: CommandParams.kwargs) -> CommandReturn:
        try:
            return func(*args, **kwargs)
        except typer.BadParameter:
            raise
        except typer.Exit:
            raise
        except ConfigurationError as exc:
            console.print(f"[red]Error:[/red] {exc.message}")
            console.print(
                "Export KUBECONFIG=<path> or run inside a cluster with a service account."
            )
            raise typer.Exit(1) from None
        except FissionError as exc:
            _render_error(exc)
            raise typer.Exit(1) from None
        except Exception as exc:
            if os.getenv("FISSION_DEBUG"):
                raise
            console.print(f"[red]Error:[/red] Unexpected failure: {exc}")
            console.print("Set FISSION_DEBUG=1 for a stack trace.")
            raise typer.Exit(1) from exc

    return wrapper


def load_json(value: str) -> dict[str, Any]:
    """Parse inline JSON or ``@path`` into a JSON object."""

    candidate = value.strip()
    if not candidate:
        raise typer.BadParameter("JSON payload cannot be empty.")
    if candidate.startswith("@"):
        path = Path(candidate[1:]).expanduser()
        if not path.exists():
            raise typer.BadParameter(f"File not found: {path}")
        candidate = path.read_text(encoding="utf-8")
    try:
        payload = json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"Invalid JSON payload: {exc}") from exc
    if not isinstance(payload, dict):
        raise typer.BadParameter("Payload must be a JSON object.")
    return payload


def resolve_namespace(ctx: typer.Context) -> str:
    ctx.ensure_object(dict)
    namespace = ctx.obj.get("namespace")
    return namespace or load_settings().namespace


def get_clients(ctx: typer.Context) -> FissionClients:
    """Return clients cached on ``ctx``, configuring the transport on first use."""

    ctx.ensure_object(dict)
    existing = ctx.obj.get("clients")
    if isinstance(existing, FissionClients):
        return existing

    settings = load_settings()
    rest_config = load_rest_config()
    rest_config.timeout = settings.timeout
    clients = FissionClients.for_namespace(configure_transport(rest_config), resolve_namespace(ctx))
    ctx.obj["clients"] = clients
    ctx.call_on_close(clients.close)
    return clients
