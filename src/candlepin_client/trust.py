"""TLS trust posture for connections to the server."""

from __future__ import annotations

import os
import ssl
from dataclasses import dataclass
from pathlib import Path

from .errors import ConfigurationError


@dataclass(frozen=True)
class TrustConfig:
    """How the TLS layer decides whether to accept the server's certificate.

    ``insecure`` always wins: when set, the peer is not verified even if a
    ``ca_path`` is also given. A ``ca_path`` is validated when the config is
    built so a bad bundle never surfaces at request time.
    """

    ca_path: str | os.PathLike[str] | None = None
    insecure: bool = False

    def __post_init__(self) -> None:
        if self.ca_path is None or str(self.ca_path) == "":
            object.__setattr__(self, "ca_path", None)
            return

        path = Path(self.ca_path)
        if not path.is_file():
            raise ConfigurationError(f"CA bundle not found: {path}", context={"ca_path": str(path)})
        try:
            ssl.create_default_context(cafile=str(path))
        except (ssl.SSLError, OSError) as exc:
            raise ConfigurationError(
                f"CA bundle {path} could not be loaded: {exc}",
                context={"ca_path": str(path)},
            ) from exc

    def resolve(self) -> ssl.SSLContext:
        """Build a fresh client-side SSL context for this posture."""
        if self.insecure:
            context = ssl.create_default_context()
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
            return context

        if self.ca_path is not None:
            return ssl.create_default_context(cafile=str(self.ca_path))

        return ssl.create_default_context()

    def describe(self) -> str:
        if self.insecure:
            return "insecure"
        if self.ca_path is not None:
            return f"ca:{self.ca_path}"
        return "system"


__all__ = ["TrustConfig"]
