"""Core data models used across session, service, streamer, and CLI."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, replace

from xledctl.core.errors import AuthError


@dataclass(frozen=True)
class Token:
    string: str
    binary: bytes
    last_verified: float | None = None

    @classmethod
    def from_string(cls, token: str) -> Token:
        try:
            binary = base64.b64decode(token, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise AuthError(f"Device returned a malformed authentication token: {exc}") from exc
        return cls(string=token, binary=binary)

    def stamped(self, when: float) -> Token:
        return replace(self, last_verified=when)


@dataclass(frozen=True)
class DeviceStatus:
    led_count: int
    measured_frame_rate: float
    device_name: str | None = None

    @property
    def frame_interval_s(self) -> float:
        """Pacing interval between frames, truncated to whole milliseconds."""
        return int(1000 / self.measured_frame_rate) / 1000


@dataclass(frozen=True)
class Coordinates:
    x: float
    y: float
    z: float


@dataclass(frozen=True)
class DeviceLayout:
    coordinates: tuple[Coordinates, ...]
    source: str

    def normalized(self) -> DeviceLayout:
        """Map x and z from roughly [-1, 1] into [0, 1]; y is kept as reported."""
        return DeviceLayout(
            coordinates=tuple(
                Coordinates(x=(c.x + 1.0) / 2.0, y=c.y, z=(c.z + 1.0) / 2.0)
                for c in self.coordinates
            ),
            source=self.source,
        )


@dataclass(frozen=True)
class StreamConfig:
    effect: str = "mix"
    gamma: float = 2.2
    udp_port: int = 7777
    chunk_size: int = 900
    verify_interval_s: float = 10.0
    mode_assert_interval_s: float = 1.0
    http_timeout_s: float | None = None
    mode_failure_warn_threshold: int = 5
