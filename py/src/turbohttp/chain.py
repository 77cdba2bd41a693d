from __future__ import annotations

import asyncio
import inspect
from collections.abc import Generator
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from turbohttp.logger import StructuredLogger, get_logger

if TYPE_CHECKING:
    from turbohttp.request import Request

NextHandler = Callable[[], Awaitable[None]]
Middleware = Callable[["Request", NextHandler], Awaitable[None] | None]
Terminal = Callable[["Request"], Any]


async def _settle(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class _Continuation:
    """Handle for the rest of the chain, already scheduled when returned.

    Awaiting it waits for the tail; a sync caller may simply drop it.
    """

    __slots__ = ("task", "awaited")

    def __init__(self, task: asyncio.Future[None]) -> None:
        self.task = task
        self.awaited = False

    def __await__(self) -> Generator[Any, None, None]:
        self.awaited = True
        return self.task.__await__()


class MiddlewareChain:
    """Ordered middlewares bound to one request.

    Each middleware receives ``(request, next_handler)``. Calling
    ``next_handler()`` schedules the rest of the chain and returns an
    awaitable; async middlewares await it, sync middlewares may just call it.
    A step is settled only once its tail has finished. Not calling it stops
    the chain without an error; exceptions propagate to the caller of
    ``execute`` unchanged.
    """

    def __init__(self, request: Request, *, logger: StructuredLogger | None = None) -> None:
        self._request = request
        self._middlewares: list[Middleware] = []
        self._logger = logger or get_logger()

    @property
    def middlewares(self) -> tuple[Middleware, ...]:
        return tuple(self._middlewares)

    def use(self, middleware: Middleware) -> None:
        if not callable(middleware):
            raise TypeError("middleware must be callable")
        self._middlewares.append(middleware)

    async def execute(self, terminal: Terminal) -> Any:
        chain = list(self._middlewares)
        request = self._request
        outcome: dict[str, Any] = {}

        async def dispatch(index: int) -> None:
            if index == len(chain):
                outcome["result"] = await _settle(terminal(request))
                return

            step: _Continuation | None = None

            def next_handler() -> _Continuation:
                nonlocal step
                if step is not None:
                    raise RuntimeError("turbohttp: next() called multiple times")
                step = _Continuation(asyncio.ensure_future(dispatch(index + 1)))
                return step

            try:
                await _settle(chain[index](request, next_handler))
            except BaseException:
                if step is not None and not step.awaited:
                    step.task.cancel()
                raise

            # The middleware called next without awaiting it.
            if step is not None and not step.awaited:
                await step.task

        await dispatch(0)

        if "result" not in outcome:
            self._logger.debug("request.chain.halted", {"middlewares": len(chain)})
            return None
        return outcome["result"]
