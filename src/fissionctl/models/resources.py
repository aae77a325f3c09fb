from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from .meta import ListMeta, ObjectMeta


class FunctionReference(BaseModel):
    name: str

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class EnvironmentReference(BaseModel):
    name: str
    namespace: str | None = None

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class Checksum(BaseModel):
    type: str
    sum: str

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class Package(BaseModel):
    """Function code, either inline (base64 ``literal``) or fetched from ``url``."""

    literal: str | None = None
    url: str | None = None
    checksum: Checksum | None = None

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class FunctionSpec(BaseModel):
    environment: EnvironmentReference
    source: Package | None = None
    deployment: Package | None = None

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class Runtime(BaseModel):
    image: str
    function_endpoint_port: int | None = Field(default=None, alias="functionEndpointPort")

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class Builder(BaseModel):
    image: str
    command: str | None = None

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class EnvironmentSpec(BaseModel):
    version: int = 1
    runtime: Runtime
    builder: Builder | None = None
    poolsize: int | None = None

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class HTTPTriggerSpec(BaseModel):
    urlpattern: str
    method: str = "GET"
    functionref: FunctionReference

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class KubernetesWatchTriggerSpec(BaseModel):
    namespace: str
    type: str
    labelselector: str | None = None
    fieldselector: str | None = None
    functionref: FunctionReference

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class FissionResource(BaseModel):
    """Common envelope of every stored resource."""

    api_version: str | None = Field(default=None, alias="apiVersion")
    kind: str | None = None
    metadata: ObjectMeta

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class Function(FissionResource):
    spec: FunctionSpec


class Environment(FissionResource):
    spec: EnvironmentSpec


class HTTPTrigger(FissionResource):
    spec: HTTPTriggerSpec


class KubernetesWatchTrigger(FissionResource):
    spec: KubernetesWatchTriggerSpec


ResourceT = TypeVar("ResourceT", bound=FissionResource)


class ResourceList(BaseModel, Generic[ResourceT]):
    api_version: str | None = Field(default=None, alias="apiVersion")
    kind: str | None = None
    metadata: ListMeta | None = None
    items: list[ResourceT] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    @property
    def continue_token(self) -> str | None:
        return self.metadata.continue_token if self.metadata else None


class FunctionList(ResourceList[Function]):
    pass


class EnvironmentList(ResourceList[Environment]):
    pass


class HTTPTriggerList(ResourceList[HTTPTrigger]):
    pass


class KubernetesWatchTriggerList(ResourceList[KubernetesWatchTrigger]):
    pass


__all__ = [
    "Builder",
    "Checksum",
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
    "Package",
    "ResourceList",
    "Runtime",
]
