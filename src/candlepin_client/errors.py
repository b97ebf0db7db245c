"""Custom exceptions raised by the Candlepin Python client."""

from __future__ import annotations

from enum import Enum
from typing import Any


class TlsFailureReason(str, Enum):
    UNTRUSTED_CA = "untrusted-ca"
    HOSTNAME_MISMATCH = "hostname-mismatch"
    CLIENT_CERT_REJECTED = "client-cert-rejected"
    HANDSHAKE_FAILED = "handshake-failed"


class CandlepinError(Exception):
    """Base error for all client failures."""

    def __init__(self, message: str, *, context: Any | None = None) -> None:
        super().__init__(message)
        self.context = context


class ConfigurationError(CandlepinError):
    """Raised when trust or credential configuration is invalid."""


class TransportError(CandlepinError):
    """Raised when the client cannot complete an exchange with the server."""


class TlsHandshakeError(TransportError):
    """Raised when the TLS handshake fails.

    ``reason`` tells apart "we do not trust the server" from "the server does
    not trust our client certificate".
    """

    def __init__(
        self,
        message: str,
        *,
        reason: TlsFailureReason,
        context: Any | None = None,
    ) -> None:
        super().__init__(message, context=context)
        self.reason = reason


class DecodeError(CandlepinError):
    """Raised when a response claims JSON but the body cannot be parsed."""


__all__ = [
    "CandlepinError",
    "ConfigurationError",
    "DecodeError",
    "TlsFailureReason",
    "TlsHandshakeError",
    "TransportError",
]
