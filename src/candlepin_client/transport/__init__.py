"""Transport implementations exposed to users."""

from .base import RequestDescriptor, Transport
from .http import HttpTransport
from .tls import classify_tls_failure, find_ssl_error

__all__ = [
    "HttpTransport",
    "RequestDescriptor",
    "Transport",
    "classify_tls_failure",
    "find_ssl_error",
]
