"""End-to-end scenario demonstrating the Python client API against a running Candlepin."""

from __future__ import annotations

import os
from pathlib import Path

from candlepin_client import (
    CandlepinClient,
    ConfigurationError,
    TlsFailureReason,
    TlsHandshakeError,
    TransportError,
)

CA_PATH = os.getenv("CANDLEPIN_CA_PATH")
CLIENT_CERT = os.getenv("CANDLEPIN_DEMO_CLIENT_CERT")
CLIENT_KEY = os.getenv("CANDLEPIN_DEMO_CLIENT_KEY")


def log_section(title: str) -> None:
    print("\n" + "=" * 80)
    print(title)
    print("=" * 80)


def show_status() -> None:
    log_section("Anonymous status check")
    with CandlepinClient.from_env() as client:
        response = client.get("/status")
        print(f"status={response.status_code} content={response.content}")


def show_owners() -> None:
    log_section("Basic auth: list owners")
    with CandlepinClient.basic_auth(ca_path=CA_PATH, insecure=CA_PATH is None) as client:
        response = client.get("/owners")
        if response.status_code == 401:
            print("Credentials rejected (401)")
            return
        for owner in response.content or []:
            print(f"- {owner.get('key')} ({owner.get('id')})")

    log_section("Basic auth with no password")
    with CandlepinClient.basic_auth(password=None, ca_path=CA_PATH, insecure=CA_PATH is None) as client:
        print(f"status={client.get('/owners').status_code}")


def show_client_cert() -> None:
    if not (CLIENT_CERT and CLIENT_KEY):
        return
    log_section("Mutual TLS")
    cert = Path(CLIENT_CERT).read_bytes()
    key = Path(CLIENT_KEY).read_bytes()
    try:
        with CandlepinClient.client_cert(cert, key, ca_path=CA_PATH) as client:
            print(f"status={client.get('/status').status_code}")
    except TlsHandshakeError as exc:
        if exc.reason is TlsFailureReason.CLIENT_CERT_REJECTED:
            print(f"Server refused our certificate: {exc}")
        else:
            print(f"We refused the server certificate: {exc}")


def main() -> None:
    try:
        show_status()
        show_owners()
        show_client_cert()
    except ConfigurationError as exc:
        print(f"Bad configuration: {exc}")
    except TransportError as exc:
        print(f"Cannot reach Candlepin: {exc}")


if __name__ == "__main__":
    main()
