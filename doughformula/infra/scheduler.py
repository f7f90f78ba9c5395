"""Periodic callbacks on the running asyncio loop."""

import asyncio
import logging
from typing import Callable, Optional, Protocol

logger = logging.getLogger("doughformula.scheduler")


class ScheduledHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_every(self, interval: float, callback: Callable[[], None]) -> ScheduledHandle: ...


class _RepeatingCall:
    def __init__(self, loop: asyncio.AbstractEventLoop, interval: float, callback: Callable[[], None]):
        self._loop = loop
        self._interval = interval
        self._callback = callback
        self._handle: Optional[asyncio.TimerHandle] = None
        self._cancelled = False
        self._schedule()

    def _schedule(self) -> None:
        self._handle = self._loop.call_later(self._interval, self._run)

    def _run(self) -> None:
        if self._cancelled:
            return
        try:
            self._callback()
        except Exception as e:
            logger.error(f"Scheduled callback failed: {e}")
        # The callback may have cancelled us (timer completion)
        if not self._cancelled:
            self._schedule()

    def cancel(self) -> None:
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class AsyncioScheduler:
    """Runs callbacks via ``loop.call_later``. Must be used from inside a running loop."""

    def call_every(self, interval: float, callback: Callable[[], None]) -> _RepeatingCall:
        loop = asyncio.get_running_loop()
        return _RepeatingCall(loop, interval, callback)
