"""High-level client: wires configuration into a trust policy, auth strategy and transport."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Mapping

from .auth import AuthStrategy, BasicAuth, ClientCertAuth, NoAuth, select_auth_strategy
from .config import ClientOptions
from .logger import create_logger
from .response import Response
from .transport import HttpTransport, Transport
from .trust import TrustConfig


class CandlepinClient:
    """Primary entry point for talking to a Candlepin server.

    The three classic flavours are available as constructors::

        CandlepinClient.no_auth(ca_path="ca.pem")
        CandlepinClient.basic_auth("admin", "admin", insecure=True)
        CandlepinClient.client_cert(cert_pem, key_pem, ca_path="ca.pem")

    All of them build the same :class:`HttpTransport`; only the auth strategy
    differs.
    """

    def __init__(
        self,
        options: ClientOptions | None = None,
        *,
        auth: AuthStrategy | None = None,
        transport: Transport | None = None,
        **overrides: Any,
    ) -> None:
        options = replace(options or ClientOptions(), **overrides)
        self.options = options
        self._logger = create_logger(logger=options.logger, level=options.log_level)
        self.base_url = options.base_url
        self.trust = TrustConfig(ca_path=options.ca_path, insecure=options.insecure)
        self.auth: AuthStrategy = auth or select_auth_strategy(options)
        self._logger.info("Initializing CandlepinClient for %s (auth=%s)", self.base_url, self.auth.name)
        self._transport = transport or self._create_transport(options)

    @classmethod
    def no_auth(cls, *, transport: Transport | None = None, **options: Any) -> "CandlepinClient":
        return cls(ClientOptions(**options), auth=NoAuth(), transport=transport)

    @classmethod
    def basic_auth(
        cls,
        username: str = "admin",
        password: str | None = "admin",
        *,
        transport: Transport | None = None,
        **options: Any,
    ) -> "CandlepinClient":
        return cls(ClientOptions(**options), auth=BasicAuth(username, password), transport=transport)

    @classmethod
    def client_cert(
        cls,
        client_cert: bytes | str,
        client_key: bytes | str,
        *,
        client_key_password: str | None = None,
        transport: Transport | None = None,
        **options: Any,
    ) -> "CandlepinClient":
        auth = ClientCertAuth(client_cert, client_key, client_key_password)
        return cls(ClientOptions(**options), auth=auth, transport=transport)

    @classmethod
    def from_env(cls, **overrides: Any) -> "CandlepinClient":
        return cls(ClientOptions.from_env(**overrides))

    @property
    def transport(self) -> Transport:
        return self._transport

    def request(
        self,
        method: str,
        path: str,
        body: Any | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        return self._transport.request(method, path, body, headers)

    def get(self, path: str, headers: Mapping[str, str] | None = None) -> Response:
        return self._transport.get(path, headers=headers)

    def post(self, path: str, body: Any | None = None, headers: Mapping[str, str] | None = None) -> Response:
        return self._transport.post(path, body, headers=headers)

    def put(self, path: str, body: Any | None = None, headers: Mapping[str, str] | None = None) -> Response:
        return self._transport.put(path, body, headers=headers)

    def delete(self, path: str, headers: Mapping[str, str] | None = None) -> Response:
        return self._transport.delete(path, headers=headers)

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> "CandlepinClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _create_transport(self, options: ClientOptions) -> Transport:
        return HttpTransport(
            self.base_url,
            trust=self.trust,
            auth=self.auth,
            connect_timeout=options.connect_timeout,
            read_timeout=options.read_timeout,
            default_headers=options.default_headers,
            logger=self._logger,
        )


__all__ = ["CandlepinClient"]
