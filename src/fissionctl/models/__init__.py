"""Re-export typed models for fissionctl."""

from __future__ import annotations

from .meta import (
    DeleteOptions,
    ListMeta,
    ListOptions,
    ObjectMeta,
    Preconditions,
    Status,
)
from .resources import (
    Builder,
    Checksum,
    Environment,
    EnvironmentList,
    EnvironmentReference,
    EnvironmentSpec,
    FissionResource,
    Function,
    FunctionList,
    FunctionReference,
    FunctionSpec,
    HTTPTrigger,
    HTTPTriggerList,
    HTTPTriggerSpec,
    KubernetesWatchTrigger,
    KubernetesWatchTriggerList,
    KubernetesWatchTriggerSpec,
    Package,
    ResourceList,
    Runtime,
)

__all__ = [
    "Builder",
    "Checksum",
    "DeleteOptions",
    "Environment",
    "EnvironmentList",
    "EnvironmentReference",
    "EnvironmentSpec",
    "FissionResource",
    "Function",
    "FunctionList",
    "FunctionReference",
    "FunctionSpec",
    "HTTPTrigger",
    "HTTPTriggerList",
    "HTTPTriggerSpec",
    "KubernetesWatchTrigger",
    "KubernetesWatchTriggerList",
    "KubernetesWatchTriggerSpec",
    "ListMeta",
    "ListOptions",
    "ObjectMeta",
    "Package",
    "Preconditions",
    "ResourceList",
    "Runtime",
    "Status",
]
