"""HTTPS transport built on top of httpx."""

from __future__ import annotations

import json
import ssl
from typing import Any, Mapping

import httpx

from ..auth import AuthStrategy, NoAuth
from ..errors import TlsHandshakeError, TransportError
from ..logger import BoundLogger, create_logger
from ..response import Response
from ..trust import TrustConfig
from .base import RequestDescriptor
from .tls import classify_tls_failure, find_ssl_error


class HttpTransport:
    """Issues requests against ``base_url`` for one trust posture and one auth strategy.

    The SSL context is resolved once, with any client certificate loaded into
    it, and handed to a single ``httpx.Client``. A caller-supplied ``client``
    is used as-is: its own TLS settings apply and ``auth`` only adds headers.
    Instances are not meant to be shared between threads; build one per
    concurrent caller.
    """

    def __init__(
        self,
        base_url: str,
        *,
        trust: TrustConfig | None = None,
        auth: AuthStrategy | None = None,
        connect_timeout: float = 3.0,
        read_timeout: float = 60.0,
        default_headers: Mapping[str, str] | None = None,
        client: httpx.Client | None = None,
        logger: BoundLogger | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._trust = trust or TrustConfig()
        self._auth = auth or NoAuth()
        self._logger = (logger or create_logger()).child("http")

        url = httpx.URL(self._base_url)
        self._host = url.host
        self._port = url.port or (443 if url.scheme == "https" else 80)

        self._default_headers = {"Accept": "application/json"}
        self._default_headers.update(default_headers or {})

        if client is None:
            client = httpx.Client(
                verify=self._build_ssl_context(),
                timeout=httpx.Timeout(read_timeout, connect=connect_timeout),
            )
            self._owns_client = True
        else:
            self._owns_client = False
        self._client = client

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def trust(self) -> TrustConfig:
        return self._trust

    @property
    def auth(self) -> AuthStrategy:
        return self._auth

    def request(
        self,
        method: str,
        path: str,
        body: Any | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        return self.send(RequestDescriptor(method.upper(), path, body, headers))

    def get(self, path: str, headers: Mapping[str, str] | None = None) -> Response:
        return self.request("GET", path, headers=headers)

    def post(self, path: str, body: Any | None = None, headers: Mapping[str, str] | None = None) -> Response:
        return self.request("POST", path, body, headers)

    def put(self, path: str, body: Any | None = None, headers: Mapping[str, str] | None = None) -> Response:
        return self.request("PUT", path, body, headers)

    def delete(self, path: str, headers: Mapping[str, str] | None = None) -> Response:
        return self.request("DELETE", path, headers=headers)

    def send(self, descriptor: RequestDescriptor) -> Response:
        url = self._url_for(descriptor.path)
        content, extra_headers = _encode_body(descriptor.body)
        request_headers = dict(self._default_headers)
        request_headers.update(extra_headers)
        request_headers.update(descriptor.headers or {})

        request = self._client.build_request(
            descriptor.method,
            url,
            content=content,
            headers=request_headers,
        )
        self._auth.apply(request)

        self._logger.debug(
            "HTTP %s %s auth=%s bytes=%d",
            descriptor.method,
            url,
            self._auth.name,
            len(content or b""),
        )
        try:
            response = self._client.send(request)
        except httpx.TimeoutException as exc:
            self._logger.warn("HTTP %s %s timed out", descriptor.method, url)
            raise TransportError(
                f"HTTP request to {url} timed out: {exc}",
                context={"url": url},
            ) from exc
        except httpx.RequestError as exc:
            error = self._map_request_error(url, exc)
            self._logger.warn("HTTP %s %s failed: %s", descriptor.method, url, error)
            raise error from exc

        body = response.content
        self._logger.debug("HTTP <- %s status=%s bytes=%d", url, response.status_code, len(body))
        return Response.from_raw(response.status_code, response.headers, body)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HttpTransport":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _build_ssl_context(self) -> ssl.SSLContext:
        context = self._trust.resolve()
        self._auth.apply_tls(context)
        self._logger.info(
            "TLS posture for %s:%s trust=%s auth=%s",
            self._host,
            self._port,
            self._trust.describe(),
            self._auth.name,
        )
        return context

    def _url_for(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self._base_url}/{path.lstrip('/')}"

    def _map_request_error(self, url: str, exc: httpx.RequestError) -> TransportError:
        context = {"url": url, "host": self._host, "port": self._port}
        ssl_error = find_ssl_error(exc)
        if ssl_error is None:
            return TransportError(f"Cannot connect to {url}: {exc}", context=context)

        reason = classify_tls_failure(ssl_error)
        return TlsHandshakeError(
            f"TLS handshake with {self._host}:{self._port} failed ({reason.value}): {ssl_error}",
            reason=reason,
            context=context,
        )


def _encode_body(body: Any | None) -> tuple[bytes | None, dict[str, str]]:
    if body is None:
        return None, {}
    if isinstance(body, (bytes, bytearray)):
        return bytes(body), {}
    if isinstance(body, str):
        return body.encode("utf-8"), {"Content-Type": "text/plain; charset=utf-8"}
    return json.dumps(body).encode("utf-8"), {"Content-Type": "application/json"}


__all__ = ["HttpTransport"]
