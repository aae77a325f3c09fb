"""Registry of the wire types each group version can encode and decode.

A :class:`Scheme` is built once during startup composition and handed to the
transport by reference; nothing is registered as a side effect of import.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, TypeVar

import pydantic
from pydantic import BaseModel

from .errors import ConfigurationError, SerializationError
from .kinds import ALL_KINDS, ResourceKind
from .models.meta import DeleteOptions, ListOptions, Status

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass(frozen=True)
class GroupVersion:
    group: str
    version: str

    def __str__(self) -> str:
        return f"{self.group}/{self.version}" if self.group else self.version

    @classmethod
    def parse(cls, value: str) -> GroupVersion:
        group, _, version = value.rpartition("/")
        return cls(group, version)


FISSION_GROUP_VERSION = GroupVersion("fission.io", "v1")
CORE_GROUP_VERSION = GroupVersion("", "v1")


class Scheme:
    def __init__(self) -> None:
        self._types: dict[tuple[GroupVersion, str], type[BaseModel]] = {}
        self._kinds: dict[type[BaseModel], tuple[GroupVersion, str]] = {}

    def register_kind(
        self, kind: str, group_version: GroupVersion, model: type[BaseModel]
    ) -> None:
        """Bind ``kind`` to ``model``; repeating an identical binding is a no-op."""

        key = (group_version, kind)
        existing = self._types.get(key)
        if existing is model:
            return
        if existing is not None:
            raise ConfigurationError(
                f"Kind {kind} in {group_version} is already bound to "
                f"{existing.__qualname__}, refusing {model.__qualname__}"
            )
        self._types[key] = model
        self._kinds.setdefault(model, key)
        logger.debug("Registered %s in %s", kind, group_version)

    def add_known_types(self, group_version: GroupVersion, *models: type[BaseModel]) -> None:
        for model in models:
            self.register_kind(model.__name__, group_version, model)

    def is_registered(self, kind: str, group_version: GroupVersion) -> bool:
        return (group_version, kind) in self._types

    def kinds(self) -> list[tuple[GroupVersion, str]]:
        return sorted(self._types, key=lambda key: (str(key[0]), key[1]))

    def kind_for(self, model: type[BaseModel]) -> tuple[GroupVersion, str]:
        try:
            return self._kinds[model]
        except KeyError:
            raise SerializationError(f"{model.__qualname__} is not registered") from None

    def model_for(self, group_version: GroupVersion, kind: str) -> type[BaseModel]:
        try:
            return self._types[(group_version, kind)]
        except KeyError:
            raise SerializationError(f"No type registered for {kind} in {group_version}") from None

    def encode(self, obj: BaseModel) -> dict[str, Any]:
        group_version, kind = self.kind_for(type(obj))
        # only fields present on decode or set by the caller are written back
        data = obj.model_dump(mode="json", by_alias=True, exclude_unset=True)
        data["apiVersion"] = str(group_version)
        data["kind"] = kind
        return data

    def decode(self, data: Any, expected: type[ModelT] | None = None) -> ModelT:
        if not isinstance(data, dict):
            raise SerializationError(f"Expected a JSON object, got {type(data).__name__}")
        kind = data.get("kind")
        if expected is not None:
            _, registered_kind = self.kind_for(expected)
            if kind and kind != registered_kind:
                raise SerializationError(f"Expected {registered_kind}, got {kind}")
            model: type[BaseModel] = expected
        else:
            api_version = data.get("apiVersion")
            if not kind or not api_version:
                raise SerializationError("Object is missing apiVersion or kind")
            model = self.model_for(GroupVersion.parse(str(api_version)), str(kind))
        try:
            return model.model_validate(data)  # type: ignore[return-value]
        except pydantic.ValidationError as exc:
            raise SerializationError(f"Unable to decode {model.__name__}: {exc}") from exc


def register_resource_kinds(
    scheme: Scheme,
    kinds: Iterable[ResourceKind] = ALL_KINDS,
    group_version: GroupVersion = FISSION_GROUP_VERSION,
) -> Scheme:
    for kind in kinds:
        # options are re-added with every kind; repeated bindings are no-ops
        scheme.add_known_types(
            group_version, kind.model, kind.list_model, ListOptions, DeleteOptions
        )
    return scheme


def build_scheme(kinds: Iterable[ResourceKind] = ALL_KINDS) -> Scheme:
    scheme = Scheme()
    scheme.add_known_types(CORE_GROUP_VERSION, Status)
    return register_resource_kinds(scheme, kinds)


__all__ = [
    "CORE_GROUP_VERSION",
    "FISSION_GROUP_VERSION",
    "GroupVersion",
    "Scheme",
    "build_scheme",
    "register_resource_kinds",
]
