from __future__ import annotations

from typing import Any

import typer
from rich import print
from rich.json import JSON

from ..clients.resource import ResourceClient
from ..clients.watch import EventType
from ..errors import SerializationError, ValidationError
from ..identity import ResourceIdentity, identity_of
from ..kinds import ResourceKind
from ..models.meta import ListOptions
from ..models.resources import FissionResource
from .common import get_clients, handle_cli_errors, load_json


def _print_json(data: Any) -> None:
    try:
        print(JSON.from_data(data))
    except Exception:  # pragma: no cover - fallback when Rich JSON fails
        print(data)


def _print_summary(resource: FissionResource) -> None:
    meta = resource.metadata
    print(f"[bold]{meta.name}[/bold] instanceId={meta.uid or '-'} version={meta.resource_version or '-'}")


def _parse(client: ResourceClient, payload: dict[str, Any]) -> FissionResource:
    try:
        return client.rest.scheme.decode(payload, client.kind.model)
    except SerializationError as exc:
        raise ValidationError(str(exc)) from exc


def build_kind_app(kind: ResourceKind) -> typer.Typer:
    """Typer sub-app exposing CRUD and watch for ``kind``."""

    app = typer.Typer(help=f"Manage {kind.kind} resources.")

    def _client(ctx: typer.Context) -> ResourceClient:
        return get_clients(ctx).for_kind(kind)

    @app.command("list")
    @handle_cli_errors
    def list_resources(
        ctx: typer.Context,
        selector: str | None = typer.Option(None, "--selector", "-l", help="Label selector."),
        limit: int | None = typer.Option(None, help="Maximum number of items to return."),
        continue_token: str | None = typer.Option(
            None, "--continue", help="Continuation token from a previous listing."
        ),
    ) -> None:
        """List resources in the namespace."""

        client = _client(ctx)
        result = client.list(
            ListOptions(label_selector=selector, limit=limit, continue_token=continue_token)
        )
        for item in result.items:
            _print_summary(item)
        if result.continue_token:
            print(f"[yellow]continue-token[/yellow] {result.continue_token}")

    @app.command("get")
    @handle_cli_errors
    def get_resource(
        ctx: typer.Context,
        name: str,
        instance_id: str | None = typer.Option(None, "--instance-id", help="Store-assigned uid."),
        version: str | None = typer.Option(None, help="Resource version."),
    ) -> None:
        """Show one resource."""

        client = _client(ctx)
        resource = client.get(ResourceIdentity.from_request(name, instance_id, version))
        _print_json(client.rest.scheme.encode(resource))

    @app.command("create")
    @handle_cli_errors
    def create_resource(
        ctx: typer.Context,
        payload: str = typer.Option(..., "--payload", help="JSON payload or @file."),
    ) -> None:
        """Create a resource from a JSON document."""

        client = _client(ctx)
        created = client.create(_parse(client, load_json(payload)))
        identity = identity_of(created)
        print(f"[green]created[/green] {identity.name} instanceId={identity.instance_id}")

    @app.command("update")
    @handle_cli_errors
    def update_resource(
        ctx: typer.Context,
        name: str,
        payload: str = typer.Option(..., "--payload", help="JSON payload or @file."),
    ) -> None:
        """Replace a resource; the payload name must match NAME."""

        client = _client(ctx)
        resource = _parse(client, load_json(payload))
        if resource.metadata.name != name:
            raise typer.BadParameter(
                f"Payload name {resource.metadata.name!r} doesn't match {name!r}."
            )
        updated = client.update(resource)
        identity = identity_of(updated)
        print(f"[green]updated[/green] {identity.name} instanceId={identity.instance_id}")

    @app.command("delete")
    @handle_cli_errors
    def delete_resource(
        ctx: typer.Context,
        name: str,
        instance_id: str | None = typer.Option(
            None,
            "--instance-id",
            help="Delete only this instance. Without it every version of NAME is removed.",
        ),
    ) -> None:
        """Delete a resource."""

        client = _client(ctx)
        client.delete(ResourceIdentity.from_request(name, instance_id))
        scope = f"instance {instance_id}" if instance_id else "all versions"
        print(f"[green]deleted[/green] {name} ({scope})")

    @app.command("watch")
    @handle_cli_errors
    def watch_resources(
        ctx: typer.Context,
        resource_version: str | None = typer.Option(
            None, "--resource-version", help="Resume from this resource version."
        ),
        max_events: int | None = typer.Option(
            None, "--max-events", help="Stop after this many events."
        ),
    ) -> None:
        """Stream change events until interrupted or the stream ends."""

        client = _client(ctx)
        seen = 0
        with client.watch(ListOptions(resource_version=resource_version)) as stream:
            try:
                for event in stream:
                    if event.type is EventType.ERROR:
                        message = event.status.message if event.status else ""
                        print(f"[red]{event.type.value}[/red] {message}")
                        raise typer.Exit(1)
                    if event.object is None:
                        continue
                    meta = event.object.metadata
                    print(f"{event.type.value} {meta.name} version={meta.resource_version or '-'}")
                    seen += 1
                    if max_events is not None and seen >= max_events:
                        break
            except KeyboardInterrupt:
                print("[yellow]watch interrupted[/yellow]")

    return app


__all__ = ["build_kind_app"]
