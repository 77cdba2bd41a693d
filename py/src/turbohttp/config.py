from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_HOST = "localhost"


@dataclass(slots=True)
class RequestConfig:
    max_body_bytes: int = 0
    default_host: str = DEFAULT_HOST


def normalize_request_config(config: RequestConfig | None) -> RequestConfig:
    if config is None:
        return RequestConfig()

    try:
        max_body = int(getattr(config, "max_body_bytes", 0) or 0)
    except Exception:  # noqa: BLE001
        max_body = 0
    if max_body < 0:
        max_body = 0

    host = str(getattr(config, "default_host", "") or "").strip() or DEFAULT_HOST

    return RequestConfig(max_body_bytes=max_body, default_host=host)


def request_config_from_env(prefix: str = "TURBOHTTP_", environ: Mapping[str, str] | None = None) -> RequestConfig:
    """Build a config from ``<prefix>MAX_BODY_BYTES`` and ``<prefix>DEFAULT_HOST``."""
    env = os.environ if environ is None else environ
    raw_max = str(env.get(f"{prefix}MAX_BODY_BYTES", "") or "").strip()
    raw_host = str(env.get(f"{prefix}DEFAULT_HOST", "") or "").strip()

    max_body = 0
    if raw_max:
        try:
            max_body = int(raw_max)
        except ValueError:
            max_body = 0

    return normalize_request_config(RequestConfig(max_body_bytes=max_body, default_host=raw_host))
