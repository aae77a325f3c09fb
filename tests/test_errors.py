from __future__ import annotations

import pytest

from fissionctl.errors import (
    ConflictError,
    HttpError,
    NotFoundError,
    SerializationError,
    TransportError,
    ValidationError,
    error_for_status,
)


@pytest.mark.parametrize(
    ("status", "expected"),
    [
        (400, ValidationError),
        (422, ValidationError),
        (404, NotFoundError),
        (409, ConflictError),
        (504, TransportError),
        (403, HttpError),
        (500, HttpError),
    ],
)
def test_error_for_status_maps_store_statuses(status: int, expected: type) -> None:
    err = error_for_status(status, "reason")

    assert isinstance(err, expected)


def test_error_for_status_prefers_store_message() -> None:
    err = error_for_status(
        409, "Conflict", details={"kind": "Status", "message": "environments \"py\" already exists"}
    )

    assert err.message == 'environments "py" already exists'
    assert err.details["kind"] == "Status"


def test_unmapped_status_is_preserved() -> None:
    err = error_for_status(403, "Forbidden")

    assert err.status_code == 403
    assert str(err) == "HTTP 403: Forbidden"


def test_status_codes_per_error_kind() -> None:
    assert ValidationError("x").status_code == 400
    assert NotFoundError("x").status_code == 404
    assert ConflictError("x").status_code == 409
    assert TransportError("x").status_code == 502
    assert TransportError("x", timeout=True).status_code == 504
    assert SerializationError("x").status_code == 500
