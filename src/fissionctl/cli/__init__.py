from __future__ import annotations

import typer

from ..kinds import ALL_KINDS
from . import serve
from .resources import build_kind_app

app = typer.Typer(help="Fission controller CLI")


def _register_sub_app(name: str, sub_app: typer.Typer) -> None:
    app.add_typer(sub_app, name=name)


for _kind in ALL_KINDS:
    _register_sub_app(_kind.cli_name, build_kind_app(_kind))

serve.register(app)


@app.callback()
def common(
    ctx: typer.Context,
    namespace: str | None = typer.Option(
        None, "--namespace", "-n", help="Resource namespace (default FISSION_NAMESPACE or 'default')."
    ),
) -> None:
    """Initialize shared Typer context state."""

    ctx.ensure_object(dict)
    ctx.obj["namespace"] = namespace


__all__ = ["app"]
