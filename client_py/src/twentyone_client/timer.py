"""
Disconnect countdown started when a round ends.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from .constants import DISCONNECT_COUNTDOWN_SECONDS

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]


class DisconnectTimer:
    """
    Cancellable one-second countdown running as a task on the client's loop.

    ``on_tick(remaining)`` fires after every second with the new value and
    ``on_expire()`` fires once after the last tick. Only one countdown runs
    at a time: ``start()`` replaces a running one. Every countdown carries a
    generation number and callbacks from a superseded generation are dropped,
    so a cancel racing with an already-scheduled wakeup has no effect.
    """

    def __init__(
        self,
        on_tick: Callable[[int], None],
        on_expire: Callable[[], None],
        seconds: int = DISCONNECT_COUNTDOWN_SECONDS,
        sleep: SleepFunc = asyncio.sleep,
    ):
        self.on_tick = on_tick
        self.on_expire = on_expire
        self.seconds = seconds
        self._sleep = sleep
        self._task: Optional[asyncio.Task] = None
        self._generation = 0

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> asyncio.Task:
        """
        Start a fresh countdown, replacing any running one.

        Runs on the running loop, or on ``loop`` when called from outside one.

        Raises:
            RuntimeError: If no loop is running and none is given
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            if loop is None:
                raise
        self.cancel()
        self._generation += 1
        self._task = loop.create_task(self._run(self._generation))
        logger.info(f"Disconnect countdown started ({self.seconds}s)")
        return self._task

    def cancel(self) -> bool:
        """Cancel the pending countdown. Returns whether one was running."""
        self._generation += 1
        task, self._task = self._task, None
        if task is None or task.done():
            return False
        task.cancel()
        logger.info("Disconnect countdown cancelled")
        return True

    async def _run(self, generation: int):
        remaining = self.seconds
        while remaining > 0:
            await self._sleep(1)
            if generation != self._generation:
                return
            remaining -= 1
            self.on_tick(remaining)
        if generation != self._generation:
            return
        self._task = None
        logger.info("Disconnect countdown expired")
        self.on_expire()
