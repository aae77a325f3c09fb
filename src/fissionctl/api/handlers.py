"""Per-kind CRUD handlers translating HTTP requests into resource client calls."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Query, Request, Response
from fastapi.responses import JSONResponse

from ..clients.resource import ResourceClient
from ..errors import SerializationError, ValidationError
from ..identity import ResourceIdentity, identity_of
from ..kinds import ResourceKind
from ..models.meta import ListOptions
from ..models.resources import FissionResource

logger = logging.getLogger(__name__)


def _client(request: Request, kind: ResourceKind) -> ResourceClient:
    return request.app.state.clients.for_kind(kind)


def _remember(request: Request, client: ResourceClient, name: str | None = None) -> None:
    """Record what the request is about so error logs can name it."""

    request.state.resource = {
        "kind": client.kind.kind,
        "namespace": client.namespace,
        "name": name,
    }


def _parse_resource(client: ResourceClient, payload: dict[str, Any]) -> FissionResource:
    try:
        return client.rest.scheme.decode(payload, client.kind.model)
    except SerializationError as exc:
        raise ValidationError(f"Invalid {client.kind.kind} body: {exc}") from exc


def build_router(kind: ResourceKind) -> APIRouter:
    router = APIRouter(prefix=f"/{kind.route}", tags=[kind.plural])

    @router.get("", name=f"list_{kind.plural}")
    def list_resources(
        request: Request,
        label_selector: str | None = Query(None, alias="labelSelector"),
        field_selector: str | None = Query(None, alias="fieldSelector"),
        resource_version: str | None = Query(None, alias="resourceVersion"),
        timeout_seconds: int | None = Query(None, alias="timeoutSeconds", ge=0),
        limit: int | None = Query(None, ge=1),
        continue_token: str | None = Query(None, alias="continue"),
    ) -> JSONResponse:
        client = _client(request, kind)
        _remember(request, client)
        options = ListOptions(
            label_selector=label_selector,
            field_selector=field_selector,
            resource_version=resource_version,
            timeout_seconds=timeout_seconds,
            limit=limit,
            continue_token=continue_token,
        )
        result = client.list(options)
        return JSONResponse(client.rest.scheme.encode(result))

    @router.post("", status_code=201, name=f"create_{kind.plural}")
    def create_resource(
        request: Request, payload: dict[str, Any] = Body(...)
    ) -> JSONResponse:
        client = _client(request, kind)
        resource = _parse_resource(client, payload)
        _remember(request, client, resource.metadata.name)
        created = client.create(resource)
        return JSONResponse(identity_of(created).summary(), status_code=201)

    @router.get("/{name}", name=f"get_{kind.plural}")
    def get_resource(
        request: Request,
        name: str,
        instance_id: str | None = Query(None, alias="instanceId"),
        uid: str | None = Query(None),
        version: str | None = Query(None),
    ) -> JSONResponse:
        client = _client(request, kind)
        _remember(request, client, name)
        identity = ResourceIdentity.from_request(name, instance_id or uid, version)
        resource = client.get(identity)
        return JSONResponse(client.rest.scheme.encode(resource))

    @router.put("/{name}", name=f"update_{kind.plural}")
    def update_resource(
        request: Request, name: str, payload: dict[str, Any] = Body(...)
    ) -> JSONResponse:
        client = _client(request, kind)
        _remember(request, client, name)
        resource = _parse_resource(client, payload)
        if resource.metadata.name != name:
            raise ValidationError(
                f"{kind.kind} name {resource.metadata.name!r} doesn't match URL name {name!r}"
            )
        updated = client.update(resource)
        return JSONResponse(identity_of(updated).summary())

    @router.delete("/{name}", name=f"delete_{kind.plural}")
    def delete_resource(
        request: Request,
        name: str,
        instance_id: str | None = Query(None, alias="instanceId"),
        uid: str | None = Query(None),
    ) -> Response:
        client = _client(request, kind)
        _remember(request, client, name)
        identity = ResourceIdentity.from_request(name, instance_id or uid)
        client.delete(identity)
        return Response(status_code=200)

    return router


__all__ = ["build_router"]
