"""TickScheduler — fixed-period scheduling over simulated time.

The scheduler never looks at a wall clock.  Whoever drives it (the Pygame
loop, a test) reports elapsed milliseconds through :meth:`advance`, and the
bound callback fires once for every full period that has accumulated:

    scheduler = TickScheduler(period_ms=1000)
    scheduler.bind(on_tick)
    scheduler.advance(2500)   # fires twice, 500 ms pending
    scheduler.pause()         # pending time is dropped
    scheduler.resume()        # next tick a full period from now

Replacing the state a callback closes over must go through
:meth:`rebind`, which drops pending time so a tick computed for the old
state can never land on the new one.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class TickScheduler:
    """Fires a callback once per fixed period of simulated time."""

    def __init__(self, period_ms: int) -> None:
        if period_ms <= 0:
            msg = f"Tick period must be positive, got {period_ms}"
            raise ValueError(msg)
        self.period_ms = period_ms
        self._callback: Callable[[], None] | None = None
        self._pending_ms = 0.0
        self._paused = False
        # Bumped on every rebind/cancel so a callback can tell it is stale
        self.generation = 0

    @property
    def is_paused(self) -> bool:
        return self._paused

    @property
    def pending_ms(self) -> float:
        """Simulated time accumulated toward the next tick."""
        return self._pending_ms

    # ── Binding ──────────────────────────────────────────────────────

    def bind(self, callback: Callable[[], None]) -> None:
        """Attach the tick callback (equivalent to :meth:`rebind`)."""
        self.rebind(callback)

    def rebind(self, callback: Callable[[], None]) -> None:
        """Cancel pending time and attach a new callback."""
        self.cancel()
        self._callback = callback

    def cancel(self) -> None:
        """Detach the callback and drop any partially elapsed period."""
        self._callback = None
        self._pending_ms = 0.0
        self.generation += 1

    # ── Pause / resume ───────────────────────────────────────────────

    def pause(self) -> None:
        self._paused = True
        self._pending_ms = 0.0

    def resume(self) -> None:
        """Restart the schedule from a fresh period boundary."""
        self._paused = False
        self._pending_ms = 0.0

    # ── Driving ──────────────────────────────────────────────────────

    def advance(self, elapsed_ms: float) -> int:
        """Account for ``elapsed_ms`` of simulated time.

        Returns:
            Number of ticks fired.
        """
        if self._paused or self._callback is None or elapsed_ms <= 0:
            return 0
        self._pending_ms += elapsed_ms
        fired = 0
        generation = self.generation
        while self._pending_ms >= self.period_ms:
            self._pending_ms -= self.period_ms
            self._callback()
            fired += 1
            # The callback may have paused or rebound us
            if self._paused or generation != self.generation:
                break
        if fired:
            logger.debug("Fired %d tick(s), %.0f ms pending", fired, self._pending_ms)
        return fired
