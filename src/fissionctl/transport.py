from __future__ import annotations

import logging
from types import TracebackType
from typing import Any
from urllib.parse import quote

import httpx

from .config import RestConfig
from .errors import ConfigurationError, SerializationError
from .http_client import JSON_CONTENT_TYPE, HttpClient
from .scheme import FISSION_GROUP_VERSION, GroupVersion, Scheme, build_scheme

logger = logging.getLogger(__name__)

API_PATH = "/apis"


class RESTClient:
    """REST transport bound to one group version and one scheme."""

    def __init__(
        self,
        http: HttpClient,
        scheme: Scheme,
        *,
        group_version: GroupVersion = FISSION_GROUP_VERSION,
        api_path: str = API_PATH,
    ) -> None:
        self.http = http
        self.scheme = scheme
        self.group_version = group_version
        self.api_path = api_path

    @property
    def root(self) -> str:
        return f"{self.api_path.rstrip('/')}/{self.group_version}"

    def path(
        self,
        namespace: str,
        plural: str,
        name: str | None = None,
        *,
        prefix: str | None = None,
    ) -> str:
        """``{root}[/{prefix}]/namespaces/{namespace}/{plural}[/{name}]``"""

        parts = [self.root]
        if prefix:
            parts.append(prefix)
        parts += ["namespaces", quote(namespace, safe=""), plural]
        if name is not None:
            parts.append(quote(name, safe=""))
        return "/".join(parts)

    @staticmethod
    def parse_json(resp: httpx.Response) -> Any:
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise SerializationError(f"Store returned invalid JSON: {exc}") from exc

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> RESTClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def configure_transport(
    config: RestConfig,
    scheme: Scheme | None = None,
    *,
    group_version: GroupVersion = FISSION_GROUP_VERSION,
    transport: httpx.BaseTransport | None = None,
) -> RESTClient:
    """Build the shared transport for every resource kind.

    Raises :class:`ConfigurationError` when the connectivity settings are
    unusable; callers treat that as fatal.
    """

    if not config.host:
        raise ConfigurationError("Object store host is not configured")
    url = httpx.URL(config.host)
    if url.scheme not in ("http", "https") or not url.host:
        raise ConfigurationError(f"Invalid object store host: {config.host!r}")

    http = HttpClient(
        config.host,
        token_getter=config.bearer_token,
        default_headers={"Accept": JSON_CONTENT_TYPE, "Content-Type": JSON_CONTENT_TYPE},
        timeout=config.timeout,
        verify=config.ssl_verify(),
        transport=transport,
    )
    logger.info("Configured object store transport %s%s/%s", config.host, API_PATH, group_version)
    return RESTClient(http, scheme or build_scheme(), group_version=group_version)


__all__ = ["API_PATH", "RESTClient", "configure_transport"]
