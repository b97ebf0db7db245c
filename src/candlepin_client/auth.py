"""Authentication strategies for the Python client.

A strategy credentials a connection at one of two phases: the TLS handshake
(client certificates) or the HTTP request (headers). Transports call both
hooks; each strategy implements the one it needs.
"""

from __future__ import annotations

import base64
import os
import ssl
import tempfile
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import httpx

from .errors import ConfigurationError

if TYPE_CHECKING:
    from .config import ClientOptions

PemData = bytes | str


@runtime_checkable
class AuthStrategy(Protocol):
    name: str

    def apply_tls(self, context: ssl.SSLContext) -> None: ...

    def apply(self, request: httpx.Request) -> None: ...


@dataclass(frozen=True)
class NoAuth:
    name: str = field(default="none", init=False)

    def apply_tls(self, context: ssl.SSLContext) -> None:
        return None

    def apply(self, request: httpx.Request) -> None:
        return None


@dataclass(frozen=True)
class BasicAuth:
    """HTTP Basic credentials.

    A missing password is sent as an empty one, so the server always sees the
    attempt and answers 401 when it is wrong.
    """

    username: str
    password: str | None = field(default=None, repr=False)
    name: str = field(default="basic", init=False)

    def __post_init__(self) -> None:
        if not self.username:
            raise ConfigurationError("Basic auth requires a username")

    @property
    def header_value(self) -> str:
        raw = f"{self.username}:{self.password or ''}".encode("utf-8")
        return "Basic " + base64.b64encode(raw).decode("ascii")

    def apply_tls(self, context: ssl.SSLContext) -> None:
        return None

    def apply(self, request: httpx.Request) -> None:
        request.headers["Authorization"] = self.header_value


@dataclass(frozen=True)
class ClientCertAuth:
    """Mutual TLS: present ``certificate`` during the handshake.

    Whether the server accepts the certificate is decided by the handshake;
    only material that OpenSSL refuses to load is rejected here.
    """

    certificate: PemData = field(repr=False)
    private_key: PemData = field(repr=False)
    key_password: str | None = field(default=None, repr=False)
    name: str = field(default="client-cert", init=False)

    def __post_init__(self) -> None:
        if not self.certificate:
            raise ConfigurationError("Client certificate auth requires a certificate")
        if not self.private_key:
            raise ConfigurationError("Client certificate auth requires a private key")

    def apply_tls(self, context: ssl.SSLContext) -> None:
        # ssl only loads chains from disk
        with tempfile.TemporaryDirectory(prefix="candlepin-") as workdir:
            cert_path = _write_pem(workdir, "client.pem", self.certificate)
            key_path = _write_pem(workdir, "client-key.pem", self.private_key)
            # A callable keeps OpenSSL from prompting on the terminal for encrypted keys
            password = self.key_password if self.key_password is not None else (lambda: "")
            try:
                context.load_cert_chain(cert_path, key_path, password=password)
            except (ssl.SSLError, OSError) as exc:
                raise ConfigurationError(f"Client certificate could not be loaded: {exc}") from exc

    def apply(self, request: httpx.Request) -> None:
        return None


def _write_pem(directory: str, filename: str, data: PemData) -> str:
    path = os.path.join(directory, filename)
    payload = data.encode("utf-8") if isinstance(data, str) else bytes(data)
    with open(path, "wb") as handle:
        handle.write(payload)
    return path


def select_auth_strategy(options: ClientOptions) -> AuthStrategy:
    """Pick the strategy implied by the configured credentials."""
    cert, key = options.client_cert, options.client_key
    if cert is not None and key is not None:
        return ClientCertAuth(cert, key, options.client_key_password)
    if cert is not None or key is not None:
        missing = "client_key" if cert is not None else "client_cert"
        raise ConfigurationError(f"Client certificate auth is missing {missing}")
    if options.username:
        return BasicAuth(options.username, options.password)
    return NoAuth()


__all__ = ["AuthStrategy", "BasicAuth", "ClientCertAuth", "NoAuth", "select_auth_strategy"]
