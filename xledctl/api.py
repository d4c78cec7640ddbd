"""Stable public API for building tooling on top of xledctl.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass

from xledctl.core.errors import (
    AuthError,
    ChannelSendError,
    ChannelUninitialized,
    ConfigLoadError,
    ConfigValidationError,
    DeviceResponseError,
    EffectResolutionError,
    SessionError,
    TransportConnectError,
    TransportError,
    VerifyError,
    XledError,
)
from xledctl.core.model import Coordinates, DeviceLayout, DeviceStatus, StreamConfig, Token
from xledctl.core.service import XledService
from xledctl.core.streamer import FrameStreamer, StreamState
from xledctl.effects.base import FrameProducer, Led
from xledctl.effects.registry import available_effects
from xledctl.transports.base import FrameChannel, HttpTransport

__all__ = [
    "XledError",
    "ConfigLoadError",
    "ConfigValidationError",
    "EffectResolutionError",
    "TransportError",
    "TransportConnectError",
    "DeviceResponseError",
    "ChannelUninitialized",
    "ChannelSendError",
    "SessionError",
    "AuthError",
    "VerifyError",
    "Coordinates",
    "DeviceLayout",
    "DeviceStatus",
    "StreamConfig",
    "Token",
    "FrameProducer",
    "FrameStreamer",
    "Led",
    "StreamState",
    "DeviceInfo",
    "Client",
]


@dataclass(frozen=True)
class DeviceInfo:
    """Snapshot of the facts the streamer needs from a device."""

    firmware_version: str
    status: DeviceStatus
    mode: str


class Client:
    """Public client for one LED device.

    A `Client` wraps session handling, device queries, and real-time
    streaming behind a stable API intended for third-party tools.
    """

    def __init__(
        self,
        address: str,
        *,
        config: StreamConfig | None = None,
        transport: HttpTransport | None = None,
        channel: FrameChannel | None = None,
    ) -> None:
        self._service = XledService(address, config=config, transport=transport, channel=channel)

    @property
    def address(self) -> str:
        return self._service.address

    def login(self) -> Token:
        return self._service.session.get_token()

    def info(self) -> DeviceInfo:
        return DeviceInfo(
            firmware_version=self._service.get_firmware_version(),
            status=self._service.get_status(),
            mode=self._service.get_mode(),
        )

    def get_mode(self) -> str:
        return self._service.get_mode()

    def set_mode(self, mode: str) -> None:
        self._service.set_mode(mode)

    def get_layout(self, *, normalized: bool = True) -> DeviceLayout:
        layout = self._service.get_layout()
        return layout.normalized() if normalized else layout

    def list_effects(self) -> tuple[str, ...]:
        return available_effects()

    def stream(self, effect: str | None = None, *, stop: threading.Event | None = None) -> FrameStreamer:
        return self._service.stream(effect, stop=stop)
