from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ObjectMeta(BaseModel):
    """Store-side metadata of a single resource."""

    name: str
    namespace: str | None = None
    uid: str | None = None
    resource_version: str | None = Field(default=None, alias="resourceVersion")
    generation: int | None = None
    creation_timestamp: str | None = Field(default=None, alias="creationTimestamp")
    labels: dict[str, str] | None = None
    annotations: dict[str, str] | None = None

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class ListMeta(BaseModel):
    resource_version: str | None = Field(default=None, alias="resourceVersion")
    continue_token: str | None = Field(default=None, alias="continue")
    remaining_item_count: int | None = Field(default=None, alias="remainingItemCount")

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class ListOptions(BaseModel):
    """Filter, label and paging parameters passed to the store untouched."""

    label_selector: str | None = Field(default=None, alias="labelSelector")
    field_selector: str | None = Field(default=None, alias="fieldSelector")
    resource_version: str | None = Field(default=None, alias="resourceVersion")
    timeout_seconds: int | None = Field(default=None, alias="timeoutSeconds")
    limit: int | None = None
    continue_token: str | None = Field(default=None, alias="continue")

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def to_params(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class Preconditions(BaseModel):
    uid: str | None = None
    resource_version: str | None = Field(default=None, alias="resourceVersion")

    model_config = ConfigDict(populate_by_name=True)


class DeleteOptions(BaseModel):
    api_version: str | None = Field(default=None, alias="apiVersion")
    kind: str | None = None
    grace_period_seconds: int | None = Field(default=None, alias="gracePeriodSeconds")
    preconditions: Preconditions | None = None
    propagation_policy: str | None = Field(default=None, alias="propagationPolicy")

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class Status(BaseModel):
    """Failure description returned by the store, also carried by watch ERROR events."""

    api_version: str | None = Field(default=None, alias="apiVersion")
    kind: str | None = None
    status: str | None = None
    message: str | None = None
    reason: str | None = None
    code: int | None = None

    model_config = ConfigDict(populate_by_name=True, extra="allow")


__all__ = [
    "DeleteOptions",
    "ListMeta",
    "ListOptions",
    "ObjectMeta",
    "Preconditions",
    "Status",
]
