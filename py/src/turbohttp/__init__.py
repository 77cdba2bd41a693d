"""turbohttp request abstraction: request model, body reading, cookies and middleware."""

from __future__ import annotations

from turbohttp.asgi import raw_request_from_asgi
from turbohttp.body import BodyAccumulator
from turbohttp.chain import Middleware, MiddlewareChain, NextHandler, Terminal
from turbohttp.config import RequestConfig, normalize_request_config, request_config_from_env
from turbohttp.cookies import is_signed, parse_cookies, sign_cookie, unsign_cookie
from turbohttp.errors import AppError, status_for_error_code
from turbohttp.logger import NoOpLogger, StructuredLogger, get_logger, set_logger
from turbohttp.middleware import TimeoutConfig, signed_cookies_middleware, timeout_middleware
from turbohttp.request import RawRequest, Request
from turbohttp.sanitization import sanitize_headers, sanitize_log_string
from turbohttp.secret_store import EnvSecret, SecretProvider, SecretsManagerSecret, StaticSecret
from turbohttp.stream import AsyncIteratorSource, BodySource, BodyStream
from turbohttp.testkit import build_body_stream, build_raw_request, create_test_request

__all__ = [
    "AppError",
    "AsyncIteratorSource",
    "BodyAccumulator",
    "BodySource",
    "BodyStream",
    "EnvSecret",
    "Middleware",
    "MiddlewareChain",
    "NextHandler",
    "NoOpLogger",
    "RawRequest",
    "Request",
    "RequestConfig",
    "SecretProvider",
    "SecretsManagerSecret",
    "StaticSecret",
    "StructuredLogger",
    "Terminal",
    "TimeoutConfig",
    "build_body_stream",
    "build_raw_request",
    "create_test_request",
    "get_logger",
    "is_signed",
    "normalize_request_config",
    "parse_cookies",
    "raw_request_from_asgi",
    "request_config_from_env",
    "sanitize_headers",
    "sanitize_log_string",
    "set_logger",
    "sign_cookie",
    "signed_cookies_middleware",
    "status_for_error_code",
    "timeout_middleware",
    "unsign_cookie",
]
