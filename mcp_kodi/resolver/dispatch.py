"""Best-effort dispatch of commands whose completion nobody waits for."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Coroutine

logger = logging.getLogger(__name__)


class BestEffortDispatcher:
    """Schedule device commands without awaiting them.

    Results are discarded on purpose; failures are only logged. Tasks are
    held until they finish so the event loop does not drop them early.
    """

    def __init__(self, logger_: logging.Logger | None = None) -> None:
        self._tasks: set[asyncio.Task[Any]] = set()
        self._logger = logger_ or logger

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def fire(
        self, description: str, coroutine: Coroutine[Any, Any, Any]
    ) -> asyncio.Task[Any]:
        """Start *coroutine* in the background and return its task."""

        task = asyncio.get_running_loop().create_task(coroutine)
        self._tasks.add(task)
        self._logger.debug("Dispatched %s", description)

        def _done(finished: asyncio.Task[Any]) -> None:
            self._tasks.discard(finished)
            if finished.cancelled():
                self._logger.warning("Dispatch of %s was cancelled", description)
                return
            exc = finished.exception()
            if exc is not None:
                self._logger.warning(
                    "Dispatch of %s failed: %s", description, exc, exc_info=exc
                )

        task.add_done_callback(_done)
        return task

    async def drain(self) -> None:
        """Wait for every outstanding dispatch to settle."""

        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
            # Let done callbacks run so finished tasks leave the set.
            await asyncio.sleep(0)


__all__ = ["BestEffortDispatcher"]
