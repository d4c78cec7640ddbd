"""Service layer used by the CLI and the public API."""

from __future__ import annotations

import logging
import threading
from typing import Any

from xledctl.core.errors import DeviceResponseError
from xledctl.core.model import Coordinates, DeviceLayout, DeviceStatus, StreamConfig
from xledctl.core.session import VERIFY_OK, SessionManager
from xledctl.core.streamer import FrameStreamer
from xledctl.core.throttle import ModeThrottle
from xledctl.effects.registry import create_effect
from xledctl.transports.base import FrameChannel, HttpTransport
from xledctl.transports.http import RequestsTransport
from xledctl.transports.udp import DatagramChannel

LOGGER = logging.getLogger(__name__)


class XledService:
    def __init__(
        self,
        address: str,
        *,
        config: StreamConfig | None = None,
        transport: HttpTransport | None = None,
        channel: FrameChannel | None = None,
        session: SessionManager | None = None,
    ) -> None:
        self.address = address
        self.config = config or StreamConfig()
        self.transport = transport or RequestsTransport(address, timeout_s=self.config.http_timeout_s)
        self.channel = channel or DatagramChannel(
            port=self.config.udp_port,
            chunk_size=self.config.chunk_size,
        )
        self.session = session or SessionManager(
            self.transport,
            verify_interval_s=self.config.verify_interval_s,
        )

    def get_status(self) -> DeviceStatus:
        response = self._authenticated("GET", "gestalt")
        return _parse_status(response)

    def get_firmware_version(self) -> str:
        response = self.transport.request("GET", "fw/version")
        version = response.get("version")
        if not isinstance(version, str):
            raise DeviceResponseError("Firmware version response did not contain a version")
        return version

    def get_mode(self) -> str:
        response = self._authenticated("GET", "led/mode")
        mode = response.get("mode")
        if not isinstance(mode, str):
            raise DeviceResponseError("Mode response did not contain a mode")
        return mode

    def set_mode(self, mode: str) -> None:
        response = self._authenticated("POST", "led/mode", json_body={"mode": mode})
        code = response.get("code", VERIFY_OK)
        if code != VERIFY_OK:
            raise DeviceResponseError(f"Device rejected mode '{mode}' with status code {code}")

    def get_layout(self) -> DeviceLayout:
        response = self._authenticated("GET", "led/layout/full")
        return _parse_layout(response)

    def create_streamer(self, effect: str | None = None) -> tuple[FrameStreamer, str]:
        """Gather device facts and build a streamer; returns it with the mode to restore."""
        status = self.get_status()
        version = self.get_firmware_version()
        LOGGER.info(
            "Device %s: firmware %s, %d LEDs at %.1f fps",
            status.device_name or self.address,
            version,
            status.led_count,
            status.measured_frame_rate,
        )
        original_mode = self.get_mode()
        layout = self.get_layout().normalized()

        producer = create_effect(effect or self.config.effect, layout, status.led_count)
        streamer = FrameStreamer(
            device=self,
            session=self.session,
            channel=self.channel,
            producer=producer,
            throttle=ModeThrottle(self.config.mode_assert_interval_s),
            frame_interval_s=status.frame_interval_s,
            gamma=self.config.gamma,
            mode_failure_warn_threshold=self.config.mode_failure_warn_threshold,
        )
        return streamer, original_mode

    def stream(self, effect: str | None = None, *, stop: threading.Event | None = None) -> FrameStreamer:
        """Stream until interrupted (or `stop` is set), then restore the original mode."""
        streamer, original_mode = self.create_streamer(effect)
        streamer.start(self.address)
        try:
            streamer.wait(stop)
        except KeyboardInterrupt:
            LOGGER.info("Interrupt received")

        if streamer.error is not None:
            streamer.shutdown(restore_mode=None)
            raise streamer.error
        streamer.shutdown(restore_mode=original_mode)
        return streamer

    def _authenticated(self, method: str, path: str, *, json_body: dict[str, Any] | None = None) -> dict[str, Any]:
        token = self.session.get_token()
        return self.transport.request(method, path, token=token.string, json_body=json_body)


def _parse_status(response: dict[str, Any]) -> DeviceStatus:
    led_count = response.get("number_of_led")
    frame_rate = response.get("measured_frame_rate")
    if not isinstance(led_count, int) or isinstance(led_count, bool) or led_count < 0:
        raise DeviceResponseError(f"Device reported an invalid LED count: {led_count!r}")
    if not isinstance(frame_rate, (int, float)) or isinstance(frame_rate, bool) or frame_rate <= 0:
        raise DeviceResponseError(f"Device reported an invalid frame rate: {frame_rate!r}")
    name = response.get("device_name")
    return DeviceStatus(
        led_count=led_count,
        measured_frame_rate=float(frame_rate),
        device_name=name if isinstance(name, str) else None,
    )


def _parse_layout(response: dict[str, Any]) -> DeviceLayout:
    raw_coordinates = response.get("coordinates")
    if not isinstance(raw_coordinates, list):
        raise DeviceResponseError("Layout response did not contain coordinates")
    try:
        coordinates = tuple(
            Coordinates(x=float(c["x"]), y=float(c["y"]), z=float(c["z"]))
            for c in raw_coordinates
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise DeviceResponseError(f"Layout response contained a malformed coordinate: {exc}") from exc
    return DeviceLayout(coordinates=coordinates, source=str(response.get("source", "")))
