"""White line sweeping across the x axis once per second; handy for checking layouts."""

from __future__ import annotations

from xledctl.effects.base import LayoutEffect, Led

CYCLE_S = 1.0
LINE_WIDTH = 0.03


class Sweep(LayoutEffect):
    def advance(self, elapsed: float | None) -> list[Led]:
        t = (self.seconds_since_start() % CYCLE_S) / CYCLE_S
        frame = self.blank_frame()
        for i, coord in self.placed_coordinates():
            if abs(coord.x - t) < LINE_WIDTH:
                frame[i] = Led(1.0, 1.0, 1.0)
        return frame
