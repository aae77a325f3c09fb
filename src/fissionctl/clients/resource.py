from __future__ import annotations

import logging
from typing import Any, Generic, TypeVar, cast

from ..errors import NotFoundError, SerializationError
from ..identity import ResourceIdentity
from ..kinds import ResourceKind
from ..models.meta import DeleteOptions, ListOptions, Preconditions
from ..models.resources import FissionResource, ResourceList
from ..transport import RESTClient
from .watch import WatchStream

logger = logging.getLogger(__name__)

ResourceT = TypeVar("ResourceT", bound=FissionResource)
ListT = TypeVar("ListT", bound=ResourceList)

WATCH_PREFIX = "watch"


class ResourceClient(Generic[ResourceT, ListT]):
    """CRUD, list and watch for one resource kind in one namespace.

    The store is the only source of truth: nothing is cached between calls and
    conflicts are raised to the caller without retrying.
    """

    def __init__(self, rest: RESTClient, kind: ResourceKind, namespace: str) -> None:
        self.rest = rest
        self.kind = kind
        self.namespace = namespace

    def __repr__(self) -> str:
        return f"<{type(self).__name__} kind={self.kind.kind} namespace={self.namespace}>"

    # Internal helpers -----------------------------------------------------------------

    @property
    def _model(self) -> type[ResourceT]:
        return cast("type[ResourceT]", self.kind.model)

    @property
    def _list_model(self) -> type[ListT]:
        return cast("type[ListT]", self.kind.list_model)

    def _path(self, name: str | None = None, *, prefix: str | None = None) -> str:
        return self.rest.path(self.namespace, self.kind.plural, name, prefix=prefix)

    def _decode(self, data: Any) -> ResourceT:
        if data is None:
            raise SerializationError(f"Store returned an empty {self.kind.kind} body")
        return self.rest.scheme.decode(data, self._model)

    def _decode_list(self, data: Any) -> ListT:
        if data is None:
            raise SerializationError(f"Store returned an empty {self.kind.list_kind} body")
        return self.rest.scheme.decode(data, self._list_model)

    @staticmethod
    def _params(options: ListOptions | None) -> dict[str, Any] | None:
        return options.to_params() if options else None

    # Operations -----------------------------------------------------------------------

    def create(self, resource: ResourceT) -> ResourceT:
        resp = self.rest.http.post(self._path(), json=self.rest.scheme.encode(resource))
        return self._decode(self.rest.parse_json(resp))

    def get(self, identity: ResourceIdentity) -> ResourceT:
        """Fetch by name; a non-empty instance id or version narrows the match."""

        if not identity.is_specific:
            resp = self.rest.http.get(self._path(identity.name))
            return self._decode(self.rest.parse_json(resp))

        candidates = self.list(ListOptions(field_selector=f"metadata.name={identity.name}"))
        for item in candidates.items:
            if identity.matches(item):
                return cast(ResourceT, item)
        raise NotFoundError(
            f"{self.kind.kind} {identity.name!r} with instanceId={identity.instance_id!r} "
            f"version={identity.version!r} not found in namespace {self.namespace!r}"
        )

    def update(self, resource: ResourceT) -> ResourceT:
        resp = self.rest.http.put(
            self._path(resource.metadata.name), json=self.rest.scheme.encode(resource)
        )
        return self._decode(self.rest.parse_json(resp))

    def delete(self, identity: ResourceIdentity, options: DeleteOptions | None = None) -> None:
        """Delete by name.

        An empty ``instance_id`` removes every version of the name. A non-empty
        one is resolved first and then guarded with a uid precondition, so only
        that instance is removed.
        """

        opts = options.model_copy() if options else DeleteOptions()
        if identity.instance_id:
            target = self.get(identity)
            opts.preconditions = Preconditions(uid=target.metadata.uid)
        else:
            logger.info(
                "Deleting all versions of %s %s/%s",
                self.kind.kind,
                self.namespace,
                identity.name,
            )
        self.rest.http.delete(self._path(identity.name), json=self.rest.scheme.encode(opts))

    def list(self, options: ListOptions | None = None) -> ListT:
        resp = self.rest.http.get(self._path(), params=self._params(options))
        return self._decode_list(self.rest.parse_json(resp))

    def watch(self, options: ListOptions | None = None) -> WatchStream[ResourceT]:
        """Open a watch; the caller owns the returned stream and must close it."""

        response_cm = self.rest.http.stream(
            "GET", self._path(prefix=WATCH_PREFIX), params=self._params(options)
        )
        return WatchStream(response_cm, self.rest.scheme, self._model)


__all__ = ["ResourceClient", "WATCH_PREFIX"]
