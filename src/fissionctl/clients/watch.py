from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from contextlib import AbstractContextManager, ExitStack
from dataclasses import dataclass
from enum import Enum
from types import TracebackType
from typing import Generic, TypeVar

import httpx

from ..errors import SerializationError
from ..models.meta import Status
from ..models.resources import FissionResource
from ..scheme import Scheme

logger = logging.getLogger(__name__)

ResourceT = TypeVar("ResourceT", bound=FissionResource)


class EventType(str, Enum):
    ADDED = "ADDED"
    MODIFIED = "MODIFIED"
    DELETED = "DELETED"
    ERROR = "ERROR"


@dataclass(frozen=True)
class WatchEvent(Generic[ResourceT]):
    """One change notification; ``ERROR`` events carry ``status`` instead of ``object``."""

    type: EventType
    object: ResourceT | None = None
    status: Status | None = None

    @property
    def is_terminal(self) -> bool:
        return self.type is EventType.ERROR


class WatchStream(Generic[ResourceT]):
    """Lazy iterator over a store watch connection.

    The stream ends after the first ``ERROR`` event, whether sent by the store
    or synthesized from a dropped connection. It is not restartable: resume by
    opening a new watch with an updated ``resourceVersion``.
    """

    def __init__(
        self,
        response_cm: AbstractContextManager[httpx.Response],
        scheme: Scheme,
        model: type[ResourceT],
    ) -> None:
        self._stack = ExitStack()
        self._response = self._stack.enter_context(response_cm)
        self._scheme = scheme
        self._model = model
        self._closed = False
        self._lines: Iterator[str] = self._response.iter_lines()

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._stack.close()

    def __enter__(self) -> WatchStream[ResourceT]:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __iter__(self) -> Iterator[WatchEvent[ResourceT]]:
        return self

    def __next__(self) -> WatchEvent[ResourceT]:
        if self._closed:
            raise StopIteration
        try:
            event = self._next_event()
        except (httpx.TransportError, httpx.StreamError) as exc:
            logger.warning("Watch on %s terminated: %s", self._model.__name__, exc)
            event = WatchEvent(
                EventType.ERROR,
                status=Status(status="Failure", reason="StreamTerminated", message=str(exc)),
            )
        except SerializationError:
            self.close()
            raise
        if event is None:
            self.close()
            raise StopIteration
        if event.is_terminal:
            self.close()
        return event

    def _next_event(self) -> WatchEvent[ResourceT] | None:
        for line in self._lines:
            if line.strip():
                return self._decode(line)
        return None

    def _decode(self, line: str) -> WatchEvent[ResourceT]:
        try:
            raw = json.loads(line)
        except ValueError as exc:
            raise SerializationError(f"Invalid watch event: {exc}") from exc
        if not isinstance(raw, dict):
            raise SerializationError("Invalid watch event: expected a JSON object")
        try:
            event_type = EventType(raw.get("type"))
        except ValueError:
            raise SerializationError(f"Unknown watch event type {raw.get('type')!r}") from None
        payload = raw.get("object")
        if event_type is EventType.ERROR:
            status = Status.model_validate(payload) if isinstance(payload, dict) else Status()
            return WatchEvent(event_type, status=status)
        return WatchEvent(event_type, object=self._scheme.decode(payload, self._model))


__all__ = ["EventType", "WatchEvent", "WatchStream"]
