"""Common transport abstractions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Protocol, runtime_checkable

from ..response import Response


@dataclass(frozen=True)
class RequestDescriptor:
    method: str
    path: str
    body: Any | None = None
    headers: Mapping[str, str] | None = None


@runtime_checkable
class Transport(Protocol):
    def request(
        self,
        method: str,
        path: str,
        body: Any | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Response: ...

    def get(self, path: str, headers: Mapping[str, str] | None = None) -> Response: ...

    def post(self, path: str, body: Any | None = None, headers: Mapping[str, str] | None = None) -> Response: ...

    def put(self, path: str, body: Any | None = None, headers: Mapping[str, str] | None = None) -> Response: ...

    def delete(self, path: str, headers: Mapping[str, str] | None = None) -> Response: ...

    def close(self) -> None: ...


__all__ = ["RequestDescriptor", "Transport"]
