"""Public surface for the Candlepin Python client."""

from .auth import AuthStrategy, BasicAuth, ClientCertAuth, NoAuth, select_auth_strategy
from .client import CandlepinClient
from .config import ClientOptions
from .errors import (
    CandlepinError,
    ConfigurationError,
    DecodeError,
    TlsFailureReason,
    TlsHandshakeError,
    TransportError,
)
from .response import Response
from .transport import HttpTransport, RequestDescriptor, Transport
from .trust import TrustConfig
from .version import __version__

__all__ = [
    "__version__",
    "AuthStrategy",
    "BasicAuth",
    "CandlepinClient",
    "CandlepinError",
    "ClientCertAuth",
    "ClientOptions",
    "ConfigurationError",
    "DecodeError",
    "HttpTransport",
    "NoAuth",
    "RequestDescriptor",
    "Response",
    "TlsFailureReason",
    "TlsHandshakeError",
    "Transport",
    "TransportError",
    "TrustConfig",
    "select_auth_strategy",
]
