from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import AsyncIterable, Callable
from typing import Any, Protocol, runtime_checkable

from turbohttp.util import to_bytes

STREAM_EVENTS = ("data", "end", "error")

Listener = Callable[..., None]


@runtime_checkable
class BodySource(Protocol):
    """Single-pass byte source owned by the transport.

    Listeners: ``data(chunk: bytes)``, ``end()``, ``error(exc: BaseException)``.
    A source starts paused and delivers nothing until ``resume`` is called.
    Sources may also offer ``close()``, called once the consumer has given up
    on the body; after it no further events are delivered.
    """

    def on(self, event: str, listener: Listener) -> None: ...

    def pause(self) -> None: ...

    def resume(self) -> None: ...


def _check_event(event: str) -> str:
    if event not in STREAM_EVENTS:
        raise ValueError(f"turbohttp: unknown stream event {event!r}")
    return event


class _Emitter:
    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {name: [] for name in STREAM_EVENTS}

    def on(self, event: str, listener: Listener) -> None:
        self._listeners[_check_event(event)].append(listener)

    def _emit(self, event: str, payload: Any = None) -> None:
        for listener in list(self._listeners[event]):
            if event == "end":
                listener()
            else:
                listener(payload)


class BodyStream(_Emitter):
    """Push-style source: the transport calls ``push``/``end``/``fail``.

    Events pushed while paused are queued and delivered in order on ``resume``.
    """

    def __init__(self) -> None:
        super().__init__()
        self._pending: deque[tuple[str, Any]] = deque()
        self._flowing = False
        self._closed = False
        self._discarded = False
        self._draining = False

    @property
    def closed(self) -> bool:
        return self._closed

    def push(self, chunk: Any) -> None:
        if chunk is None:
            self.end()
            return
        self._enqueue("data", to_bytes(chunk))

    def end(self) -> None:
        self._enqueue("end")
        self._closed = True

    def fail(self, exc: BaseException) -> None:
        self._enqueue("error", exc)
        self._closed = True

    def pause(self) -> None:
        self._flowing = False

    def resume(self) -> None:
        if self._discarded:
            return
        self._flowing = True
        self._drain()

    def close(self) -> None:
        """Drop queued events; later pushes are accepted and discarded."""
        self._discarded = True
        self._flowing = False
        self._pending.clear()

    def _enqueue(self, event: str, payload: Any = None) -> None:
        if self._closed:
            raise RuntimeError("turbohttp: stream already closed")
        if self._discarded:
            return
        self._pending.append((event, payload))
        self._drain()

    def _drain(self) -> None:
        if self._draining:
            return
        self._draining = True
        try:
            while self._flowing and self._pending:
                event, payload = self._pending.popleft()
                self._emit(event, payload)
        finally:
            self._draining = False


class AsyncIteratorSource(_Emitter):
    """Adapts an async iterable of chunks; pumping starts on the first ``resume``."""

    def __init__(self, chunks: AsyncIterable[Any]) -> None:
        super().__init__()
        self._chunks = chunks
        self._flowing = asyncio.Event()
        self._task: asyncio.Task[None] | None = None
        self._closed = False

    @property
    def pumping(self) -> bool:
        return self._task is not None and not self._task.done()

    def pause(self) -> None:
        self._flowing.clear()

    def resume(self) -> None:
        if self._closed:
            return
        self._flowing.set()
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(self._pump())

    def close(self) -> None:
        """Stop pumping and release the underlying iterator."""
        self._closed = True
        self._flowing.clear()
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def _pump(self) -> None:
        try:
            async for chunk in self._chunks:
                await self._flowing.wait()
                data = to_bytes(chunk)
                if data:
                    self._emit("data", data)
        except asyncio.CancelledError:
            aclose = getattr(self._chunks, "aclose", None)
            if aclose is not None:
                await aclose()
            raise
        except Exception as exc:  # noqa: BLE001
            self._emit("error", exc)
            return
        self._emit("end")
