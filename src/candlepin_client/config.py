"""Client configuration and environment loading."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping

from .logger import LogLevel

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 8443
DEFAULT_CONTEXT = "/candlepin"

_LOG_LEVELS = {"trace", "debug", "info", "warn", "error"}


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class ClientOptions:
    """Everything needed to build a trust policy, an auth strategy and a transport."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    context: str = DEFAULT_CONTEXT
    use_ssl: bool = True
    ca_path: str | os.PathLike[str] | None = None
    insecure: bool = False
    username: str | None = None
    password: str | None = None
    client_cert: bytes | str | None = None
    client_key: bytes | str | None = None
    client_key_password: str | None = None
    connect_timeout: float = 3.0
    read_timeout: float = 60.0
    default_headers: Mapping[str, str] | None = None
    logger: Any | None = None
    log_level: LogLevel = "info"

    @property
    def base_url(self) -> str:
        scheme = "https" if self.use_ssl else "http"
        context = "/" + self.context.strip("/") if self.context.strip("/") else ""
        return f"{scheme}://{self.host}:{self.port}{context}"

    @classmethod
    def from_env(cls, **overrides: Any) -> "ClientOptions":
        """Create options from ``CANDLEPIN_*`` variables, evaluated at call time.

        Keyword arguments take precedence over the environment. Certificates and
        keys are never read from the environment; pass them explicitly.
        """
        log_level = os.getenv("CANDLEPIN_LOG_LEVEL", cls.log_level).strip().lower()
        values: dict[str, Any] = {
            "host": os.getenv("CANDLEPIN_HOST", cls.host),
            "port": _int_env("CANDLEPIN_PORT", cls.port),
            "context": os.getenv("CANDLEPIN_CONTEXT", cls.context),
            "use_ssl": _bool_env("CANDLEPIN_USE_SSL", cls.use_ssl),
            "ca_path": os.getenv("CANDLEPIN_CA_PATH") or None,
            "insecure": _bool_env("CANDLEPIN_INSECURE", cls.insecure),
            "username": os.getenv("CANDLEPIN_USERNAME") or None,
            "password": os.getenv("CANDLEPIN_PASSWORD"),
            "connect_timeout": _float_env("CANDLEPIN_CONNECT_TIMEOUT", cls.connect_timeout),
            "read_timeout": _float_env("CANDLEPIN_READ_TIMEOUT", cls.read_timeout),
            "log_level": log_level if log_level in _LOG_LEVELS else cls.log_level,
        }
        values.update(overrides)
        return cls(**values)


__all__ = ["ClientOptions", "DEFAULT_CONTEXT", "DEFAULT_HOST", "DEFAULT_PORT"]
