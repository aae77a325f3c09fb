from __future__ import annotations

import logging
from collections.abc import Iterable

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..clients import FissionClients
from ..errors import FissionError, ValidationError
from ..kinds import ALL_KINDS, ResourceKind
from .handlers import build_router

logger = logging.getLogger(__name__)

API_PREFIX = "/v1"


def _error_response(exc: FissionError) -> JSONResponse:
    return JSONResponse(
        {"error": exc.reason, "message": exc.message},
        status_code=exc.status_code,
    )


async def _handle_fission_error(request: Request, exc: FissionError) -> JSONResponse:
    context = getattr(request.state, "resource", None) or {}
    level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(
        level,
        "%s %s failed (kind=%s namespace=%s name=%s): %s %s",
        request.method,
        request.url.path,
        context.get("kind"),
        context.get("namespace"),
        context.get("name"),
        exc.reason,
        exc.message,
    )
    return _error_response(exc)


async def _handle_request_validation(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    )
    logger.warning("%s %s rejected: %s", request.method, request.url.path, messages)
    return _error_response(ValidationError(messages or "Invalid request"))


def create_app(clients: FissionClients, kinds: Iterable[ResourceKind] = ALL_KINDS) -> FastAPI:
    """Build the controller API on top of already-configured clients."""

    app = FastAPI(title="Fission controller", version="0.1.0")
    app.state.clients = clients
    for kind in kinds:
        app.include_router(build_router(kind), prefix=API_PREFIX)
    app.add_exception_handler(FissionError, _handle_fission_error)
    app.add_exception_handler(RequestValidationError, _handle_request_validation)

    @app.get("/healthz", include_in_schema=False)
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    return app


__all__ = ["API_PREFIX", "create_app"]
