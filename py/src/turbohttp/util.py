from __future__ import annotations

import urllib.parse
from collections.abc import Mapping
from typing import Any


def normalize_path(path: str) -> str:
    value = str(path or "").strip()
    if not value:
        return "/"
    if "?" in value:
        value = value.split("?", 1)[0]
    if not value.startswith("/"):
        value = "/" + value
    return value or "/"


def header_value(headers: Mapping[str, Any] | None, name: str, *, sep: str = ", ") -> str | None:
    """Case-insensitive header lookup; list values are joined with ``sep``.

    Returns ``None`` when the header is absent so callers can tell it apart
    from a header that is present but empty.
    """
    if not headers:
        return None
    key = str(name or "").strip().lower()
    value = headers.get(key)
    if value is None:
        for k, v in headers.items():
            if str(k).strip().lower() == key:
                value = v
                break
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return sep.join([str(v) for v in value])
    return str(value)


def first_comma_token(value: Any) -> str:
    return str(value or "").split(",", 1)[0]


def parse_query_string(raw: str) -> dict[str, str | list[str]]:
    out: dict[str, str | list[str]] = {}
    for key, value in urllib.parse.parse_qsl(str(raw or ""), keep_blank_values=True):
        existing = out.get(key)
        if existing is None:
            out[key] = value
        elif isinstance(existing, list):
            existing.append(value)
        else:
            out[key] = [existing, value]
    return out


def to_bytes(value: Any) -> bytes:
    if value is None:
        return b""
    if isinstance(value, bytes):
        return bytes(value)
    if isinstance(value, bytearray):
        return bytes(value)
    if isinstance(value, memoryview):
        return value.tobytes()
    if isinstance(value, str):
        return value.encode("utf-8")
    raise TypeError("body must be bytes-like or str")
