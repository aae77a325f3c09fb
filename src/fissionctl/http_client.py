from __future__ import annotations

import logging
import ssl
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from types import TracebackType
from typing import Any

import httpx

from .errors import TransportError, error_for_status

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"


class HttpClient:
    """Thin httpx wrapper that injects Authorization and maps store errors.

    Each call is sent once; retrying is left to callers.
    """

    def __init__(
        self,
        base_url: str,
        token_getter: Callable[[], str | None] | None = None,
        default_headers: dict[str, str] | None = None,
        timeout: float = 30.0,
        verify: bool | str | ssl.SSLContext = True,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._token_getter = token_getter
        client_kwargs: dict[str, Any] = {"timeout": timeout, "verify": verify}
        if transport is not None:
            client_kwargs["transport"] = transport
        self._client = httpx.Client(**client_kwargs)
        self._default_headers = default_headers or {}

    def _auth_header(self) -> dict[str, str]:
        if not self._token_getter:
            return {}
        token = self._token_getter()
        return {"Authorization": f"Bearer {token}"} if token else {}

    def _url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    def _headers(self, headers: dict[str, str] | None) -> dict[str, str]:
        return {**self._default_headers, **(headers or {}), **self._auth_header()}

    @staticmethod
    def _raise_for_status(resp: httpx.Response) -> None:
        if resp.status_code < 400:
            return
        try:
            detail = resp.json()
        except Exception:
            detail = resp.text
        raise error_for_status(resp.status_code, resp.reason_phrase, details=detail)

    def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        url = self._url(path)
        request_kwargs: dict[str, Any] = {"params": params, "headers": self._headers(headers)}
        if json is not None:
            request_kwargs["json"] = json
        try:
            resp = self._client.request(method, url, **request_kwargs)
        except httpx.TimeoutException as e:
            raise TransportError(f"Timed out talking to {url}: {e}", timeout=True) from e
        except httpx.TransportError as e:
            raise TransportError(f"Transport error: {e}") from e
        logger.debug("%s %s -> %s", method, url, resp.status_code)
        self._raise_for_status(resp)
        return resp

    @contextmanager
    def stream(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Iterator[httpx.Response]:
        """Open a streaming response; the body is read lazily by the caller."""

        url = self._url(path)
        try:
            with self._client.stream(
                method, url, params=params, headers=self._headers(headers)
            ) as resp:
                if resp.status_code >= 400:
                    resp.read()
                    self._raise_for_status(resp)
                yield resp
        except httpx.TimeoutException as e:
            raise TransportError(f"Timed out talking to {url}: {e}", timeout=True) from e
        except httpx.TransportError as e:
            raise TransportError(f"Transport error: {e}") from e

    def get(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("PUT", path, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("DELETE", path, **kwargs)

    def close(self) -> None:
        """Close the underlying :class:`httpx.Client`."""

        self._client.close()

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
