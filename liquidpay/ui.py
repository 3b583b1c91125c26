"""UI task queue.

All observable checkout state belongs to one asyncio event loop, the "UI
loop". Methods decorated with ``ui_bound`` refuse to run anywhere else, and
callers on foreign threads go through ``UIQueue.submit``.
"""

import asyncio
import concurrent.futures
import functools
import inspect
from typing import Any, Callable, Coroutine, Optional

import structlog

logger = structlog.get_logger(__name__)


class UIThreadError(RuntimeError):
    pass


class UIQueue:
    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        # Must be created on the UI loop unless one is passed in
        self.loop = loop or asyncio.get_running_loop()

    def is_current(self) -> bool:
        try:
            return asyncio.get_running_loop() is self.loop
        except RuntimeError:
            return False

    def check(self, what: str = "this call") -> None:
        if not self.is_current():
            raise UIThreadError(f"{what} must run on the UI loop")

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> None:
        self.loop.call_soon_threadsafe(callback, *args)

    def submit(self, coro: Coroutine[Any, Any, Any]) -> concurrent.futures.Future:
        """Schedule ``coro`` on the UI loop from any thread.

        Callers may drop the returned future; a failure is logged either way.
        """
        future = asyncio.run_coroutine_threadsafe(coro, self.loop)
        future.add_done_callback(_log_failure)
        return future


def _log_failure(future: concurrent.futures.Future) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        logger.error("UI job failed", exc_info=exc)


def ui_bound(func):
    """Mark a method of an object with a ``ui`` queue as UI-loop only."""
    if inspect.iscoroutinefunction(func):
        @functools.wraps(func)
        async def async_wrapper(self, *args, **kwargs):
            self.ui.check(func.__qualname__)
            return await func(self, *args, **kwargs)

        return async_wrapper

    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        self.ui.check(func.__qualname__)
        return func(self, *args, **kwargs)

    return wrapper
