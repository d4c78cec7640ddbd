"""Blended sinusoids drifting over the layout."""

from __future__ import annotations

import math

from xledctl.effects.base import LayoutEffect, Led


class Plasma(LayoutEffect):
    def advance(self, elapsed: float | None) -> list[Led]:
        t = self.seconds_since_start()
        frame = self.blank_frame()

        for i, coord in self.placed_coordinates():
            x, y = coord.x, coord.y

            horizontal = math.sin(x * 10.0 + t * 2.0)
            rotating = math.sin(10.0 * (x * math.sin(t / 2.0) + y * math.cos(t / 3.0)) + t)
            cx = x + 0.5 * math.sin(t / 5.0)
            cy = y + 0.5 * math.cos(t / 3.0)
            circular = math.sin(math.sqrt(100.0 * (cx * cx + cy * cy) + 1.0) + t)

            # squash into [0, 1]
            blend = math.sin((horizontal + circular) * math.pi / 2.0) / 2.0 + 0.5

            frame[i] = Led(r=abs(rotating), g=1.0 - blend, b=blend * 0.5)

        return frame
