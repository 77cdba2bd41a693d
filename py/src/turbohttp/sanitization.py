from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_REDACTED_VALUE = "[REDACTED]"

_SENSITIVE_HEADERS: set[str] = {
    "authorization",
    "cookie",
    "proxy-authorization",
    "set-cookie",
    "x-api-key",
}


def sanitize_log_string(value: str) -> str:
    v = str(value or "")
    if not v:
        return v
    return v.replace("\r", "").replace("\n", "")


def sanitize_header_value(name: str, value: Any) -> Any:
    if str(name or "").strip().lower() in _SENSITIVE_HEADERS:
        return _REDACTED_VALUE
    if isinstance(value, (list, tuple)):
        return [sanitize_log_string(str(v)) for v in value]
    return sanitize_log_string(str(value))


def sanitize_headers(headers: Mapping[str, Any] | None) -> dict[str, Any]:
    if not headers:
        return {}
    return {str(k): sanitize_header_value(str(k), v) for k, v in headers.items()}
