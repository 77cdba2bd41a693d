from __future__ import annotations

import asyncio
import json as jsonlib
from typing import Any

from turbohttp.errors import AppError
from turbohttp.logger import StructuredLogger, get_logger
from turbohttp.stream import BodySource
from turbohttp.util import parse_query_string, to_bytes


class BodyAccumulator:
    """Reads a body source once, on first demand, and caches the result.

    A source error is cached too: every later read re-raises the same
    exception. ``max_bytes <= 0`` disables the size cap.
    """

    def __init__(
        self,
        source: BodySource | None,
        *,
        max_bytes: int = 0,
        logger: StructuredLogger | None = None,
    ) -> None:
        self._source = source
        self._max_bytes = int(max_bytes or 0)
        self._logger = logger or get_logger()
        self._future: asyncio.Future[bytes] | None = None

    @property
    def cached(self) -> bytes | None:
        fut = self._future
        if fut is None or not fut.done() or fut.cancelled() or fut.exception() is not None:
            return None
        return fut.result()

    async def read(self) -> bytes:
        if self._future is None:
            self._future = self._start()
        return await asyncio.shield(self._future)

    def _start(self) -> asyncio.Future[bytes]:
        fut: asyncio.Future[bytes] = asyncio.get_running_loop().create_future()
        source = self._source
        if source is None:
            fut.set_result(b"")
            return fut

        chunks: list[bytes] = []
        total = 0

        def on_data(chunk: Any) -> None:
            nonlocal total
            if fut.done():
                return
            data = to_bytes(chunk)
            total += len(data)
            if self._max_bytes > 0 and total > self._max_bytes:
                source.pause()
                close = getattr(source, "close", None)
                if callable(close):
                    close()
                self._logger.warn("request.body.too_large", {"bytes": total, "max_bytes": self._max_bytes})
                fut.set_exception(AppError("app.too_large", "request too large"))
                return
            chunks.append(data)

        def on_end() -> None:
            if fut.done():
                return
            body = b"".join(chunks)
            chunks.clear()
            self._logger.debug("request.body.read", {"bytes": len(body)})
            fut.set_result(body)

        def on_error(exc: BaseException) -> None:
            if fut.done():
                return
            self._logger.error("request.body.failed", {"error": str(exc)})
            fut.set_exception(exc)

        source.on("data", on_data)
        source.on("end", on_end)
        source.on("error", on_error)
        source.resume()
        return fut

    async def json(self) -> Any:
        body = await self.read()
        try:
            return jsonlib.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, jsonlib.JSONDecodeError) as exc:
            raise AppError("app.bad_request", "invalid json") from exc

    async def url_encoded(self) -> dict[str, str | list[str]]:
        body = await self.read()
        try:
            text = body.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise AppError("app.bad_request", "invalid form body") from exc
        return parse_query_string(text)
