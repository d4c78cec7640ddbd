"""Rate limit for re-asserting real-time mode on the device."""

from __future__ import annotations

import time
from collections.abc import Callable

from xledctl.core.locks import RWLock


class ModeThrottle:
    def __init__(
        self,
        interval_s: float = 1.0,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.interval_s = interval_s
        self._clock = clock
        self._lock = RWLock()
        self._last_dispatched: float | None = None

    @property
    def last_dispatched(self) -> float | None:
        with self._lock.read():
            return self._last_dispatched

    def due(self) -> bool:
        """Return True and record the dispatch when a mode-set call should go out now."""
        with self._lock.write():
            now = self._clock()
            if self._last_dispatched is not None and now - self._last_dispatched <= self.interval_s:
                return False
            self._last_dispatched = now
            return True
