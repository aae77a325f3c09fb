from __future__ import annotations

from dataclasses import dataclass
from types import TracebackType

from ..kinds import ENVIRONMENTS, FUNCTIONS, HTTP_TRIGGERS, WATCH_TRIGGERS, ResourceKind
from ..models.resources import (
    Environment,
    EnvironmentList,
    Function,
    FunctionList,
    HTTPTrigger,
    HTTPTriggerList,
    KubernetesWatchTrigger,
    KubernetesWatchTriggerList,
)
from ..transport import RESTClient
from .resource import ResourceClient
from .watch import EventType, WatchEvent, WatchStream

FunctionClient = ResourceClient[Function, FunctionList]
EnvironmentClient = ResourceClient[Environment, EnvironmentList]
HTTPTriggerClient = ResourceClient[HTTPTrigger, HTTPTriggerList]
WatchTriggerClient = ResourceClient[KubernetesWatchTrigger, KubernetesWatchTriggerList]


@dataclass
class FissionClients:
    """One client per kind, all sharing a single transport."""

    rest: RESTClient
    namespace: str
    functions: FunctionClient
    environments: EnvironmentClient
    http_triggers: HTTPTriggerClient
    watch_triggers: WatchTriggerClient

    @classmethod
    def for_namespace(cls, rest: RESTClient, namespace: str) -> FissionClients:
        return cls(
            rest=rest,
            namespace=namespace,
            functions=ResourceClient(rest, FUNCTIONS, namespace),
            environments=ResourceClient(rest, ENVIRONMENTS, namespace),
            http_triggers=ResourceClient(rest, HTTP_TRIGGERS, namespace),
            watch_triggers=ResourceClient(rest, WATCH_TRIGGERS, namespace),
        )

    def for_kind(self, kind: ResourceKind) -> ResourceClient:
        for client in (self.functions, self.environments, self.http_triggers, self.watch_triggers):
            if client.kind == kind:
                return client
        raise KeyError(kind.kind)

    def close(self) -> None:
        self.rest.close()

    def __enter__(self) -> FissionClients:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


__all__ = [
    "EnvironmentClient",
    "EventType",
    "FissionClients",
    "FunctionClient",
    "HTTPTriggerClient",
    "ResourceClient",
    "WatchEvent",
    "WatchStream",
    "WatchTriggerClient",
]
