from __future__ import annotations

import asyncio
from dataclasses import dataclass

from turbohttp.chain import Middleware, NextHandler
from turbohttp.cookies import is_signed, unsign_cookie
from turbohttp.errors import AppError
from turbohttp.logger import StructuredLogger, get_logger
from turbohttp.request import Request
from turbohttp.sanitization import sanitize_log_string
from turbohttp.secret_store import Secret, secret_bytes


@dataclass(slots=True)
class TimeoutConfig:
    default_timeout_ms: int = 0
    operation_timeouts_ms: dict[str, int] | None = None
    timeout_message: str = "request timeout"


def timeout_middleware(config: TimeoutConfig) -> Middleware:
    cfg = _normalize_timeout_config(config)

    async def mw(request: Request, next_handler: NextHandler) -> None:
        timeout_ms = _timeout_for_request(request, cfg)
        if timeout_ms <= 0:
            await next_handler()
            return

        try:
            async with asyncio.timeout(float(timeout_ms) / 1000.0) as deadline:
                await next_handler()
        except TimeoutError:
            if deadline.expired():
                raise AppError("app.timeout", cfg.timeout_message) from None
            raise

    return mw


def _normalize_timeout_config(config: TimeoutConfig) -> TimeoutConfig:
    default_ms = int(getattr(config, "default_timeout_ms", 0) or 0)
    if default_ms == 0:
        default_ms = 30_000

    message = str(getattr(config, "timeout_message", "") or "").strip() or "request timeout"

    op_timeouts = getattr(config, "operation_timeouts_ms", None)

    return TimeoutConfig(
        default_timeout_ms=default_ms,
        operation_timeouts_ms=op_timeouts if isinstance(op_timeouts, dict) else None,
        timeout_message=message,
    )


def _timeout_for_request(request: Request, config: TimeoutConfig) -> int:
    timeout_ms = int(config.default_timeout_ms)

    if isinstance(config.operation_timeouts_ms, dict):
        op_key = f"{request.method}:{request.path}"
        override = config.operation_timeouts_ms.get(op_key)
        if override is not None:
            try:
                timeout_ms = int(override)
            except Exception:  # noqa: BLE001
                timeout_ms = int(config.default_timeout_ms)

    return timeout_ms


def signed_cookies_middleware(secret: Secret, *, logger: StructuredLogger | None = None) -> Middleware:
    """Verify every ``s:``-prefixed cookie into ``request.signed_cookies``.

    Cookies with a bad signature are left out and logged; the chain always
    continues.
    """
    log = logger or get_logger()

    async def mw(request: Request, next_handler: NextHandler) -> None:
        key = secret_bytes(secret)
        for name, value in request.cookies.items():
            if not is_signed(value):
                continue
            unsigned = unsign_cookie(value, key)
            if unsigned is None:
                log.warn("request.cookie.bad_signature", {"cookie": sanitize_log_string(name)})
                continue
            request.signed_cookies[name] = unsigned
        await next_handler()

    return mw
