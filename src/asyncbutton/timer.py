"""Single-slot revert timer on the asyncio event loop.

At most one timer is pending at a time. Scheduling replaces (and cancels)
the previous one. Each schedule bumps a generation counter, captured by the
callback, so a callback that was already queued on the loop when it was
cancelled sees a stale generation and silently drops itself.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

logger = logging.getLogger(__name__)


class RevertTimer:
    """Cancellable, replaceable one-shot timer.

    Callbacks run on the event loop that was running when ``schedule`` was
    called, so they never interleave with other code on that loop.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None
        self._gen: int = 0

    @property
    def active(self) -> bool:
        """True while a callback is scheduled and not yet fired or cancelled."""
        return self._handle is not None

    def schedule(self, delay: float, on_fire: Callable[[], None]) -> None:
        """Cancel any pending timer, then run *on_fire* once after *delay* seconds.

        Raises:
            ValueError: If *delay* is negative.
            RuntimeError: If no loop was given and none is running.
        """
        if delay < 0:
            raise ValueError(f"delay must not be negative, got {delay!r}")

        self.cancel()
        gen = self._gen
        loop = self._loop or asyncio.get_running_loop()
        self._handle = loop.call_later(delay, self._fire, gen, on_fire)
        logger.debug("Revert timer scheduled in %.3fs (gen=%d)", delay, gen)

    def cancel(self) -> None:
        """Cancel the pending timer, if any. Safe to call repeatedly."""
        self._gen += 1
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
            logger.debug("Revert timer cancelled")

    def _fire(self, gen: int, on_fire: Callable[[], None]) -> None:
        if gen != self._gen:
            return  # Superseded or cancelled after being queued
        self._handle = None
        self._gen += 1
        on_fire()
