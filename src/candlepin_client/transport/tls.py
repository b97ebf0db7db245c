"""Classification of TLS failures raised underneath httpx."""

from __future__ import annotations

import ssl

from ..errors import TlsFailureReason

# OpenSSL X509_V_ERR_HOSTNAME_MISMATCH / X509_V_ERR_IP_ADDRESS_MISMATCH
_HOSTNAME_VERIFY_CODES = frozenset({62, 64})

# Alerts the server sends when it refuses the certificate we presented
_CLIENT_CERT_ALERTS = frozenset(
    {
        "TLSV1_ALERT_UNKNOWN_CA",
        "TLSV1_ALERT_ACCESS_DENIED",
        "TLSV13_ALERT_CERTIFICATE_REQUIRED",
        "SSLV3_ALERT_BAD_CERTIFICATE",
        "SSLV3_ALERT_CERTIFICATE_UNKNOWN",
        "SSLV3_ALERT_CERTIFICATE_EXPIRED",
        "SSLV3_ALERT_CERTIFICATE_REVOKED",
        "SSLV3_ALERT_UNSUPPORTED_CERTIFICATE",
    }
)


def find_ssl_error(exc: BaseException) -> ssl.SSLError | None:
    """Walk the cause/context chain looking for the originating ``ssl`` error."""
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        if isinstance(current, ssl.SSLError):
            return current
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return None


def classify_tls_failure(error: ssl.SSLError) -> TlsFailureReason:
    if isinstance(error, ssl.SSLCertVerificationError):
        if getattr(error, "verify_code", None) in _HOSTNAME_VERIFY_CODES:
            return TlsFailureReason.HOSTNAME_MISMATCH
        return TlsFailureReason.UNTRUSTED_CA

    reason = (getattr(error, "reason", None) or "").upper()
    if reason in _CLIENT_CERT_ALERTS:
        return TlsFailureReason.CLIENT_CERT_REJECTED
    return TlsFailureReason.HANDSHAKE_FAILED


__all__ = ["classify_tls_failure", "find_ssl_error"]
