from __future__ import annotations

import urllib.parse
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from turbohttp.body import BodyAccumulator
from turbohttp.chain import Middleware, MiddlewareChain, Terminal
from turbohttp.config import RequestConfig, normalize_request_config
from turbohttp.cookies import parse_cookies, sign_cookie, unsign_cookie
from turbohttp.errors import AppError
from turbohttp.logger import StructuredLogger, get_logger
from turbohttp.sanitization import sanitize_headers, sanitize_log_string
from turbohttp.secret_store import Secret
from turbohttp.stream import BodySource
from turbohttp.util import first_comma_token, header_value, normalize_path, parse_query_string


@dataclass(slots=True)
class RawRequest:
    """What the transport hands over for one incoming request."""

    method: str | None = None
    url: str | None = None
    headers: Mapping[str, str | list[str]] = field(default_factory=dict)
    remote_address: str | None = None
    body: BodySource | None = None


def _parse_method(method: str | None) -> str:
    return str(method or "").strip().upper()


def _parse_url(url: str, host: str) -> tuple[str, dict[str, str | list[str]]]:
    try:
        parts = urllib.parse.urlsplit(urllib.parse.urljoin(f"http://{host}", url))
    except ValueError:
        raise AppError("app.bad_request", "invalid url") from None
    return normalize_path(parts.path), parse_query_string(parts.query)


class Request:
    """One incoming HTTP request.

    Built synchronously from a :class:`RawRequest`; the body stays in the
    transport's stream until one of the ``parse_body_as_*`` coroutines asks
    for it, and is read at most once.
    """

    __slots__ = (
        "_method",
        "_url",
        "_path",
        "_query",
        "_headers",
        "_cookies",
        "_signed_cookies",
        "_peer_address",
        "_default_host",
        "_body",
        "_chain",
        "_logger",
    )

    def __init__(
        self,
        raw: RawRequest,
        *,
        config: RequestConfig | None = None,
        logger: StructuredLogger | None = None,
    ) -> None:
        cfg = normalize_request_config(config)
        self._logger = logger or get_logger()
        self._default_host = cfg.default_host

        self._method = _parse_method(raw.method)
        self._url = str(raw.url or "")
        self._headers: dict[str, Any] = dict(raw.headers or {})
        self._path, self._query = _parse_url(self._url, self._host())
        self._cookies = parse_cookies(header_value(self._headers, "cookie", sep="; ") or "")
        self._signed_cookies: dict[str, str] = {}
        self._peer_address = str(raw.remote_address or "")

        self._body = BodyAccumulator(raw.body, max_bytes=cfg.max_body_bytes, logger=self._logger)
        self._chain = MiddlewareChain(self, logger=self._logger)

        self._logger.debug(
            "request.created",
            {
                "method": self._method,
                "path": sanitize_log_string(self._path),
                "client_ip": sanitize_log_string(self.get_client_ip()),
                "headers": sanitize_headers(self._headers),
            },
        )

    def __repr__(self) -> str:
        return f"Request(method={self._method!r}, url={self._url!r})"

    @property
    def method(self) -> str:
        return self._method

    @property
    def url(self) -> str:
        return self._url

    @property
    def path(self) -> str:
        return self._path

    @property
    def query(self) -> dict[str, str | list[str]]:
        return self._query

    @property
    def headers(self) -> dict[str, Any]:
        return self._headers

    @property
    def cookies(self) -> dict[str, str]:
        return self._cookies

    @property
    def signed_cookies(self) -> dict[str, str]:
        return self._signed_cookies

    @property
    def peer_address(self) -> str:
        return self._peer_address

    @property
    def body(self) -> bytes | None:
        return self._body.cached

    @property
    def middlewares(self) -> tuple[Middleware, ...]:
        return self._chain.middlewares

    def _host(self) -> str:
        host = first_comma_token(header_value(self._headers, "host")).strip()
        return host or self._default_host

    def rewrite_url(self, url: str) -> None:
        path, query = _parse_url(str(url or ""), self._host())
        self._url = str(url or "")
        self._path = path
        self._query = query

    def get_client_ip(self) -> str:
        forwarded = header_value(self._headers, "x-forwarded-for")
        if forwarded:
            return first_comma_token(forwarded).strip()
        return self._peer_address

    def get_proxy_ip(self) -> str:
        if header_value(self._headers, "x-forwarded-for"):
            return self._peer_address
        return ""

    def sign_cookie(self, value: str, secret: Secret) -> str:
        return sign_cookie(value, secret)

    def unsign_cookie(self, signed_value: str, secret: Secret) -> str | None:
        return unsign_cookie(signed_value, secret)

    async def parse_body_as_buffer(self) -> bytes:
        return await self._body.read()

    async def parse_body_as_json(self) -> Any:
        return await self._body.json()

    async def parse_body_as_url_encoded(self) -> dict[str, str | list[str]]:
        return await self._body.url_encoded()

    def use(self, middleware: Middleware) -> Request:
        self._chain.use(middleware)
        return self

    async def execute_middlewares(self, terminal: Terminal) -> Any:
        return await self._chain.execute(terminal)
