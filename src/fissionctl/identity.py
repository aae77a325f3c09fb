"""Addressing of resource instances by name, instance id and version.

An empty ``instance_id`` or ``version`` means "unspecified": reads and deletes
match any instance of the name, while creation always receives a fresh
store-assigned instance id.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .errors import ValidationError
from .models.resources import FissionResource


class ResourceIdentity(BaseModel):
    name: str
    instance_id: str = Field(default="", alias="instanceId")
    version: str = ""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @classmethod
    def from_request(
        cls,
        name: str | None,
        instance_id: str | None = None,
        version: str | None = None,
    ) -> ResourceIdentity:
        """Build an identity from raw path/query strings."""

        if not name:
            raise ValidationError("Resource name is required")
        return cls(name=name, instance_id=instance_id or "", version=version or "")

    @property
    def is_specific(self) -> bool:
        return bool(self.instance_id or self.version)

    def matches(self, resource: FissionResource) -> bool:
        meta = resource.metadata
        if meta.name != self.name:
            return False
        if self.instance_id and meta.uid != self.instance_id:
            return False
        if self.version and meta.resource_version != self.version:
            return False
        return True

    def summary(self) -> dict[str, str]:
        """Minimal ``{name, instanceId}`` form returned after create/update."""

        return {"name": self.name, "instanceId": self.instance_id}


def identity_of(resource: FissionResource) -> ResourceIdentity:
    meta = resource.metadata
    return ResourceIdentity(
        name=meta.name,
        instance_id=meta.uid or "",
        version=meta.resource_version or "",
    )


__all__ = ["ResourceIdentity", "identity_of"]
