from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from turbohttp.config import RequestConfig
from turbohttp.logger import StructuredLogger
from turbohttp.request import RawRequest, Request
from turbohttp.stream import BodyStream
from turbohttp.util import to_bytes


def build_body_stream(body: Any = b"", *, chunks: Iterable[Any] | None = None, error: BaseException | None = None) -> BodyStream:
    """Return a stream that already holds the whole body.

    ``chunks`` wins over ``body`` when given. With ``error`` set the stream
    fails after the chunks instead of ending.
    """
    stream = BodyStream()
    parts = list(chunks) if chunks is not None else [body]
    for part in parts:
        data = to_bytes(part)
        if data:
            stream.push(data)
    if error is not None:
        stream.fail(error)
    else:
        stream.end()
    return stream


def build_raw_request(
    method: str = "GET",
    url: str = "/",
    *,
    headers: dict[str, str | list[str]] | None = None,
    body: Any = b"",
    chunks: Iterable[Any] | None = None,
    remote_address: str | None = "127.0.0.1",
    error: BaseException | None = None,
) -> RawRequest:
    hdrs = dict(headers or {})
    if not any(str(k).lower() == "host" for k in hdrs):
        hdrs["host"] = "localhost"
    return RawRequest(
        method=method,
        url=url,
        headers=hdrs,
        remote_address=remote_address,
        body=build_body_stream(body, chunks=chunks, error=error),
    )


def create_test_request(
    method: str = "GET",
    url: str = "/",
    *,
    headers: dict[str, str | list[str]] | None = None,
    body: Any = b"",
    chunks: Iterable[Any] | None = None,
    remote_address: str | None = "127.0.0.1",
    error: BaseException | None = None,
    config: RequestConfig | None = None,
    logger: StructuredLogger | None = None,
) -> Request:
    raw = build_raw_request(
        method,
        url,
        headers=headers,
        body=body,
        chunks=chunks,
        remote_address=remote_address,
        error=error,
    )
    return Request(raw, config=config, logger=logger)
