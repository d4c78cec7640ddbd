"""Frame producer interface and per-LED color type."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from typing import Protocol

from xledctl.core.model import Coordinates, DeviceLayout

DEFAULT_GAMMA = 2.2


@dataclass
class Led:
    r: float = 0.0
    g: float = 0.0
    b: float = 0.0

    def gamma_corrected_bytes(self, gamma: float = DEFAULT_GAMMA) -> bytes:
        return bytes(gamma_correct(channel, gamma) for channel in (self.r, self.g, self.b))


def gamma_correct(value: float, gamma: float = DEFAULT_GAMMA) -> int:
    """Map a 0.0-1.0 intensity to a perceptual byte value."""
    value = min(max(value, 0.0), 1.0)
    return min(max(round(255 * value**gamma), 0), 255)


def encode_frame(leds: Sequence[Led], gamma: float = DEFAULT_GAMMA) -> bytes:
    return b"".join(led.gamma_corrected_bytes(gamma) for led in leds)


class FrameProducer(Protocol):
    def advance(self, elapsed: float | None) -> Sequence[Led]:
        """Return the next frame; `elapsed` is seconds since the previous tick."""


EffectFactory = Callable[..., FrameProducer]


class LayoutEffect:
    """Shared state for effects that paint over the device layout."""

    def __init__(
        self,
        layout: DeviceLayout,
        led_count: int,
        start_t: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.layout = layout
        self.led_count = led_count
        self.start_t = start_t
        self._clock = clock

    def seconds_since_start(self) -> float:
        return self._clock() - self.start_t

    def placed_coordinates(self) -> Iterator[tuple[int, Coordinates]]:
        """Yield (index, coordinates) for LEDs that have both a slot and a position."""
        return zip(range(self.led_count), self.layout.coordinates)

    def blank_frame(self) -> list[Led]:
        return [Led() for _ in range(self.led_count)]
