from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any

from turbohttp.errors import AppError
from turbohttp.request import RawRequest
from turbohttp.stream import AsyncIteratorSource

Receive = Callable[[], Awaitable[dict[str, Any]]]


def raw_request_from_asgi(scope: dict[str, Any], receive: Receive) -> RawRequest:
    if str(scope.get("type") or "") != "http":
        raise ValueError("turbohttp: asgi scope type must be http")

    return RawRequest(
        method=str(scope.get("method") or ""),
        url=_url_from_scope(scope),
        headers=_headers_from_scope(scope),
        remote_address=_client_from_scope(scope),
        body=AsyncIteratorSource(_receive_body(receive)),
    )


def _url_from_scope(scope: dict[str, Any]) -> str:
    raw_path = scope.get("raw_path")
    if raw_path:
        path = bytes(raw_path).decode("latin-1")
    else:
        path = str(scope.get("path") or "/")

    query = scope.get("query_string") or b""
    if isinstance(query, str):
        query = query.encode("latin-1")
    if query:
        return f"{path}?{bytes(query).decode('latin-1')}"
    return path


def _headers_from_scope(scope: dict[str, Any]) -> dict[str, str | list[str]]:
    out: dict[str, str | list[str]] = {}
    for raw_name, raw_value in scope.get("headers") or []:
        name = bytes(raw_name).decode("latin-1").lower()
        value = bytes(raw_value).decode("latin-1")
        existing = out.get(name)
        if existing is None:
            out[name] = value
        elif isinstance(existing, list):
            existing.append(value)
        else:
            out[name] = [existing, value]
    return out


def _client_from_scope(scope: dict[str, Any]) -> str:
    client = scope.get("client")
    if not client:
        return ""
    return str(client[0] or "")


async def _receive_body(receive: Receive) -> AsyncIterator[bytes]:
    while True:
        message = await receive()
        kind = str(message.get("type") or "")
        if kind == "http.disconnect":
            raise AppError("app.client_disconnected", "client disconnected")
        if kind != "http.request":
            continue
        body = message.get("body") or b""
        if body:
            yield bytes(body)
        if not message.get("more_body", False):
            return
