"""Cancellable delayed task used to coalesce bursts of triggers.

Each ``schedule()`` cancels whatever is still waiting and starts a new
countdown; only the last one in a burst actually runs. A call that has
already started running is never cancelled.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import structlog

logger = structlog.get_logger(__name__)


class DebouncedTask:

    def __init__(self, action: Callable[[], Awaitable[None]], delay: float) -> None:
        self._action = action
        self._delay = delay
        self._waiting: asyncio.Task[None] | None = None
        self._running: asyncio.Task[None] | None = None

    @property
    def pending(self) -> bool:
        return self._waiting is not None and not self._waiting.done()

    def schedule(self) -> None:
        self.cancel()
        self._waiting = asyncio.get_running_loop().create_task(self._countdown())

    def cancel(self) -> None:
        if self.pending:
            self._waiting.cancel()  # type: ignore[union-attr]
        self._waiting = None

    async def drain(self) -> None:
        """Wait until nothing is waiting or running."""
        while True:
            task = self._waiting if self.pending else self._running
            if task is None or task.done():
                return
            try:
                await asyncio.shield(task)
            except asyncio.CancelledError:
                if not task.cancelled():
                    raise

    async def _countdown(self) -> None:
        await asyncio.sleep(self._delay)
        # Past this point the call is dispatched and no longer cancellable.
        self._waiting = None
        self._running = asyncio.current_task()
        try:
            await self._action()
        except Exception:
            logger.exception("debounced_action_failed")
