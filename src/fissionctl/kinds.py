from __future__ import annotations

from dataclasses import dataclass

from .models.resources import (
    Environment,
    EnvironmentList,
    FissionResource,
    Function,
    FunctionList,
    HTTPTrigger,
    HTTPTriggerList,
    KubernetesWatchTrigger,
    KubernetesWatchTriggerList,
    ResourceList,
)


@dataclass(frozen=True)
class ResourceKind:
    """A resource collection served by the object store."""

    model: type[FissionResource]
    list_model: type[ResourceList]
    plural: str
    route: str
    cli_name: str

    @property
    def kind(self) -> str:
        return self.model.__name__

    @property
    def list_kind(self) -> str:
        return self.list_model.__name__


FUNCTIONS = ResourceKind(Function, FunctionList, "functions", "functions", "function")
ENVIRONMENTS = ResourceKind(
    Environment, EnvironmentList, "environments", "environments", "environment"
)
HTTP_TRIGGERS = ResourceKind(
    HTTPTrigger, HTTPTriggerList, "httptriggers", "triggers/http", "httptrigger"
)
WATCH_TRIGGERS = ResourceKind(
    KubernetesWatchTrigger,
    KubernetesWatchTriggerList,
    "kuberneteswatchtriggers",
    "watches",
    "watch",
)

ALL_KINDS: tuple[ResourceKind, ...] = (FUNCTIONS, ENVIRONMENTS, HTTP_TRIGGERS, WATCH_TRIGGERS)


__all__ = [
    "ALL_KINDS",
    "ENVIRONMENTS",
    "FUNCTIONS",
    "HTTP_TRIGGERS",
    "ResourceKind",
    "WATCH_TRIGGERS",
]
