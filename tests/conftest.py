from __future__ import annotations

import base64
import socket
from collections.abc import Iterator
from typing import Any

import pytest

from xledctl.core.errors import TransportError

TOKEN_BINARY = bytes(range(8))
TOKEN_STRING = base64.b64encode(TOKEN_BINARY).decode()


class FakeDeviceTransport:
    """In-memory stand-in for the device session API."""

    def __init__(self, *, led_count: int = 10, frame_rate: float = 30.0, mode: str = "movie") -> None:
        self.calls: list[tuple[str, str, str | None, dict[str, Any] | None]] = []
        self.mode = mode
        self.posted_modes: list[str] = []
        self.verify_code = 1000
        self.fail_login = False
        self.responses: dict[tuple[str, str], dict[str, Any]] = {
            ("POST", "login"): {"authentication_token": TOKEN_STRING, "code": 1000},
            ("GET", "gestalt"): {
                "device_name": "Tree",
                "number_of_led": led_count,
                "measured_frame_rate": frame_rate,
            },
            ("GET", "fw/version"): {"version": "2.8.18", "code": 1000},
            ("GET", "led/layout/full"): {
                "source": "2d",
                "coordinates": [
                    {"x": -1.0 + 2.0 * i / max(led_count - 1, 1), "y": i / max(led_count, 1), "z": 0.0}
                    for i in range(led_count)
                ],
                "code": 1000,
            },
        }

    def request(
        self,
        method: str,
        path: str,
        *,
        token: str | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        self.calls.append((method, path, token, json_body))
        if path == "login" and self.fail_login:
            raise TransportError("connection refused")
        if path == "verify":
            return {"code": self.verify_code}
        if path == "led/mode":
            if method == "POST":
                assert json_body is not None
                self.posted_modes.append(json_body["mode"])
                return {"code": 1000}
            return {"mode": self.mode, "code": 1000}
        return self.responses[(method, path)]

    def paths(self) -> list[str]:
        return [path for _, path, _, _ in self.calls]


@pytest.fixture
def device() -> FakeDeviceTransport:
    return FakeDeviceTransport()


@pytest.fixture
def udp_receiver() -> Iterator[socket.socket]:
    receiver = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    receiver.bind(("127.0.0.1", 0))
    receiver.settimeout(2.0)
    try:
        yield receiver
    finally:
        receiver.close()
