"""Normalized responses returned by every transport."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping

from .errors import DecodeError


def media_type(content_type: str | None) -> str:
    """``"Application/JSON; charset=utf-8"`` -> ``"application/json"``."""
    return (content_type or "").split(";", 1)[0].strip().lower()


def is_json_media_type(content_type: str | None) -> bool:
    mtype = media_type(content_type)
    if "/" not in mtype:
        return False
    subtype = mtype.split("/", 1)[1]
    return subtype == "json" or subtype.endswith("+json")


def _charset(content_type: str | None) -> str:
    for param in (content_type or "").split(";")[1:]:
        key, _, value = param.partition("=")
        if key.strip().lower() == "charset" and value.strip():
            return value.strip().strip('"')
    return "utf-8"


def _decode_text(body: bytes, content_type: str | None) -> str:
    try:
        return body.decode(_charset(content_type), errors="replace")
    except LookupError:
        return body.decode("utf-8", errors="replace")


@dataclass(frozen=True)
class Response:
    status_code: int
    content: Any = None
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @classmethod
    def from_raw(
        cls,
        status: int,
        headers: Mapping[str, str] | None,
        body: bytes | str | None,
    ) -> "Response":
        """Decode ``body`` according to its content type.

        JSON media types (``application/json``, ``text/json``, ``*+json``) are
        parsed; an empty JSON body gives ``None`` and a malformed one raises
        :class:`DecodeError`. ``text/*`` bodies become ``str``; anything else is
        kept as raw bytes.
        """
        normalized = {str(k).lower(): str(v) for k, v in (headers or {}).items()}
        content_type = normalized.get("content-type")
        raw = body.encode("utf-8") if isinstance(body, str) else bytes(body or b"")

        content: Any
        if is_json_media_type(content_type):
            if not raw.strip():
                content = None
            else:
                try:
                    content = json.loads(raw.decode(_charset(content_type)))
                except (UnicodeDecodeError, LookupError, json.JSONDecodeError) as exc:
                    raise DecodeError(
                        f"Invalid JSON response (status {status}): {exc}",
                        context={"status": status, "body": raw[:200].decode("utf-8", errors="replace")},
                    ) from exc
        elif media_type(content_type).startswith("text/"):
            content = _decode_text(raw, content_type)
        else:
            content = raw

        return cls(status_code=int(status), content=content, headers=normalized)


__all__ = ["Response", "is_json_media_type", "media_type"]
