"""Lookup of bundled frame producers by name."""

from __future__ import annotations

import time
from collections.abc import Callable

from xledctl.core.errors import EffectResolutionError
from xledctl.core.model import DeviceLayout
from xledctl.effects.base import EffectFactory, FrameProducer
from xledctl.effects.mix import Mix
from xledctl.effects.plasma import Plasma
from xledctl.effects.sweep import Sweep

EFFECTS: dict[str, EffectFactory] = {
    "mix": Mix,
    "plasma": Plasma,
    "sweep": Sweep,
}


def available_effects() -> tuple[str, ...]:
    return tuple(sorted(EFFECTS))


def create_effect(
    name: str,
    layout: DeviceLayout,
    led_count: int,
    start_t: float | None = None,
    *,
    clock: Callable[[], float] = time.monotonic,
) -> FrameProducer:
    factory = EFFECTS.get(name)
    if factory is None:
        available = ", ".join(available_effects())
        raise EffectResolutionError(f"Unknown effect '{name}'. Available: {available}")
    if start_t is None:
        start_t = clock()
    return factory(layout, led_count, start_t, clock=clock)
