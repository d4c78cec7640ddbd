"""Red and blue bands crossing the layout diagonally, leaving fading trails."""

from __future__ import annotations

import time
from collections.abc import Callable

from xledctl.core.model import DeviceLayout
from xledctl.effects.base import LayoutEffect, Led

CYCLE_S = 5.0
BAND_WIDTH = 0.03
FADE_PER_S = 0.5


class Mix(LayoutEffect):
    def __init__(
        self,
        layout: DeviceLayout,
        led_count: int,
        start_t: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(layout, led_count, start_t, clock=clock)
        self.frame = self.blank_frame()

    def _fade_out(self, elapsed: float) -> None:
        step = elapsed * FADE_PER_S
        for led in self.frame:
            led.r = max(0.0, led.r - step)
            led.b = max(0.0, led.b - step)

    def advance(self, elapsed: float | None) -> list[Led]:
        if elapsed is not None:
            self._fade_out(elapsed)

        t = (self.seconds_since_start() % CYCLE_S) / CYCLE_S
        for i, coord in self.placed_coordinates():
            diagonal = (coord.x + coord.y) / 2.0
            if abs((diagonal - 0.1) / 2.0 - t) < BAND_WIDTH:
                self.frame[i].r = 1.0
            if abs((1.0 - diagonal + 0.1) / 2.0 - t) < BAND_WIDTH:
                self.frame[i].b = 1.0

        return [Led(led.r, led.g, led.b) for led in self.frame]
