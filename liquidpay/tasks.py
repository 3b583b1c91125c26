import asyncio
from typing import Any, Coroutine, Set

import structlog

logger = structlog.get_logger(__name__)


class TaskRunner:
    """Runs fire-and-forget jobs on the current loop.

    Every job gets its own error boundary: a failure is logged with the job
    name and never reaches the caller or the other jobs.
    """

    def __init__(self):
        self._tasks: Set[asyncio.Task] = set()

    def __len__(self) -> int:
        return len(self._tasks)

    def submit(self, name: str, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(self._guard(name, coro), name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _guard(self, name: str, coro: Coroutine[Any, Any, Any]) -> None:
        try:
            await coro
        except Exception:
            logger.exception("Background job failed", job=name)

    async def drain(self) -> None:
        """Wait until every submitted job, including ones submitted meanwhile, is done."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))
