from __future__ import annotations

import base64
import datetime
import ipaddress
import json
import socket
import ssl
import threading
from dataclasses import dataclass
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Iterator

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import ExtendedKeyUsageOID, NameOID

ADMIN_AUTHORIZATION = "Basic " + base64.b64encode(b"admin:admin").decode("ascii")


def _key_usage(*, ca: bool) -> x509.KeyUsage:
    return x509.KeyUsage(
        digital_signature=True,
        content_commitment=False,
        key_encipherment=not ca,
        data_encipherment=False,
        key_agreement=False,
        key_cert_sign=ca,
        crl_sign=ca,
        encipher_only=False,
        decipher_only=False,
    )


def _issue(
    common_name: str,
    key: rsa.RSAPrivateKey,
    issuer: x509.Certificate | None = None,
    issuer_key: rsa.RSAPrivateKey | None = None,
    *,
    usage: x509.ObjectIdentifier | None = None,
) -> x509.Certificate:
    now = datetime.datetime.now(datetime.timezone.utc)
    subject = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    is_ca = issuer is None
    signing_key = issuer_key or key
    builder = (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(issuer.subject if issuer is not None else subject)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=30))
        .add_extension(x509.BasicConstraints(ca=is_ca, path_length=None), critical=True)
        .add_extension(_key_usage(ca=is_ca), critical=True)
        .add_extension(x509.SubjectKeyIdentifier.from_public_key(key.public_key()), critical=False)
        .add_extension(
            x509.AuthorityKeyIdentifier.from_issuer_public_key(signing_key.public_key()),
            critical=False,
        )
    )
    if usage is not None:
        builder = builder.add_extension(x509.ExtendedKeyUsage([usage]), critical=False)
    if usage == ExtendedKeyUsageOID.SERVER_AUTH:
        builder = builder.add_extension(
            x509.SubjectAlternativeName(
                [x509.DNSName("localhost"), x509.IPAddress(ipaddress.ip_address("127.0.0.1"))]
            ),
            critical=False,
        )
    return builder.sign(signing_key, hashes.SHA256())


def _new_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


def _cert_pem(cert: x509.Certificate) -> bytes:
    return cert.public_bytes(serialization.Encoding.PEM)


def _key_pem(key: rsa.RSAPrivateKey) -> bytes:
    return key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.TraditionalOpenSSL,
        serialization.NoEncryption(),
    )


@dataclass
class Pki:
    ca_path: Path
    rogue_ca_path: Path
    server_cert_path: Path
    server_key_path: Path
    client_cert: bytes
    client_key: bytes
    rogue_client_cert: bytes
    rogue_client_key: bytes


@pytest.fixture(scope="session")
def pki(tmp_path_factory: pytest.TempPathFactory) -> Pki:
    directory = tmp_path_factory.mktemp("pki")

    ca_key = _new_key()
    ca_cert = _issue("Test CA", ca_key)
    rogue_ca_key = _new_key()
    rogue_ca_cert = _issue("Unrelated CA", rogue_ca_key)

    server_key = _new_key()
    server_cert = _issue("localhost", server_key, ca_cert, ca_key, usage=ExtendedKeyUsageOID.SERVER_AUTH)
    client_key = _new_key()
    client_cert = _issue("client", client_key, ca_cert, ca_key, usage=ExtendedKeyUsageOID.CLIENT_AUTH)
    rogue_key = _new_key()
    rogue_cert = _issue("unsigned", rogue_key, rogue_ca_cert, rogue_ca_key, usage=ExtendedKeyUsageOID.CLIENT_AUTH)

    paths = {
        "test-ca.cert": _cert_pem(ca_cert),
        "unrelated-ca.cert": _cert_pem(rogue_ca_cert),
        "server.cert": _cert_pem(server_cert),
        "server.key": _key_pem(server_key),
    }
    for name, data in paths.items():
        (directory / name).write_bytes(data)

    return Pki(
        ca_path=directory / "test-ca.cert",
        rogue_ca_path=directory / "unrelated-ca.cert",
        server_cert_path=directory / "server.cert",
        server_key_path=directory / "server.key",
        client_cert=_cert_pem(client_cert),
        client_key=_key_pem(client_key),
        rogue_client_cert=_cert_pem(rogue_cert),
        rogue_client_key=_key_pem(rogue_key),
    )


class _Handler(BaseHTTPRequestHandler):
    server: "_TlsServer"

    def do_GET(self) -> None:
        self.server.seen_authorization.append(self.headers.get("Authorization"))
        if self.path == "/candlepin/status":
            self._send(200, b'{ "message": "Hello" }', "text/json")
        elif self.path == "/candlepin/owners":
            if self.headers.get("Authorization") != ADMIN_AUTHORIZATION:
                self._send(401, json.dumps({"displayMessage": "Invalid credentials"}).encode(), "application/json")
            else:
                self._send(200, json.dumps([{"id": "owner-1", "key": "admin"}]).encode(), "application/json")
        else:
            self._send(404, b"not found", "text/plain")

    def _send(self, status: int, body: bytes, content_type: str) -> None:
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args: object) -> None:
        pass


class _TlsServer(ThreadingHTTPServer):
    daemon_threads = True

    def __init__(self, context: ssl.SSLContext) -> None:
        super().__init__(("127.0.0.1", 0), _Handler)
        self.socket = context.wrap_socket(self.socket, server_side=True)
        self.seen_authorization: list[str | None] = []

    @property
    def port(self) -> int:
        return self.server_address[1]


def _serve(context: ssl.SSLContext) -> Iterator[_TlsServer]:
    server = _TlsServer(context)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield server
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)


@pytest.fixture
def https_server(pki: Pki) -> Iterator[_TlsServer]:
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    context.load_cert_chain(pki.server_cert_path, pki.server_key_path)
    yield from _serve(context)


@pytest.fixture
def mtls_server(pki: Pki) -> Iterator[_TlsServer]:
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    context.load_cert_chain(pki.server_cert_path, pki.server_key_path)
    context.verify_mode = ssl.CERT_REQUIRED
    context.load_verify_locations(cafile=str(pki.ca_path))
    # TLS 1.2 rejects client certificates inside the handshake rather than on first read
    context.maximum_version = ssl.TLSVersion.TLSv1_2
    yield from _serve(context)


@pytest.fixture
def unused_port() -> int:
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]
