"""
Frame scheduler.

Requests one tick per display frame on the asyncio event loop. There is
no fixed timestep: each callback is exactly one simulation tick, so game
speed follows the frame rate.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class FrameScheduler:
    def __init__(
        self,
        tick_fn: Callable[[], None],
        *,
        fps: int = 60,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._tick_fn = tick_fn
        self._interval = 1.0 / max(1, fps)
        self._loop = loop

        self._running = False
        self._handle: asyncio.TimerHandle | None = None
        self._frames = 0

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def frames(self) -> int:
        """Ticks driven since the last start()."""
        return self._frames

    def start(self) -> None:
        if self._running:
            return
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        self._running = True
        self._frames = 0
        logger.debug("FrameScheduler started")
        self._schedule_next()

    def stop(self) -> None:
        if not self._running and self._handle is None:
            return
        self._running = False
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        logger.debug(f"FrameScheduler stopped after {self._frames} frames")

    def _schedule_next(self) -> None:
        self._handle = self._loop.call_later(self._interval, self._tick)

    def _tick(self) -> None:
        self._handle = None
        # A callback that fires after stop() must do nothing.
        if not self._running:
            return

        try:
            self._tick_fn()
        except Exception:
            self.stop()
            raise

        self._frames += 1

        # The tick itself may have stopped us (win, loss, pause).
        if self._running:
            self._schedule_next()
