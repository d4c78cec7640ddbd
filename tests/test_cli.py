from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from xledctl import cli
from xledctl.core.model import DeviceStatus, StreamConfig


class FakeStreamer:
    frames_sent = 42


class FakeService:
    def __init__(self, address: str, config: StreamConfig | None = None) -> None:
        self.address = address
        self.config = config
        self.modes: list[str] = []

    def get_firmware_version(self) -> str:
        return "2.8.18"

    def get_status(self) -> DeviceStatus:
        return DeviceStatus(led_count=250, measured_frame_rate=23.5, device_name="Twinkly_Tree")

    def get_mode(self) -> str:
        return "movie"

    def set_mode(self, mode: str) -> None:
        self.modes.append(mode)

    def stream(self, effect=None, *, stop=None):
        return FakeStreamer()


runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))


def test_info_command(monkeypatch):
    monkeypatch.setattr(cli, "XledService", FakeService)
    result = runner.invoke(cli.app, ["info", "192.168.4.1"])
    assert result.exit_code == 0
    assert "Device: Twinkly_Tree" in result.stdout
    assert "leds: 250" in result.stdout
    assert "frame rate: 23.5 fps" in result.stdout
    assert "mode: movie" in result.stdout


def test_mode_command_prints_mode(monkeypatch):
    monkeypatch.setattr(cli, "XledService", FakeService)
    result = runner.invoke(cli.app, ["mode", "192.168.4.1"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "movie"


def test_mode_command_sets_mode(monkeypatch):
    monkeypatch.setattr(cli, "XledService", FakeService)
    result = runner.invoke(cli.app, ["mode", "192.168.4.1", "off"])
    assert result.exit_code == 0
    assert "Set mode=off on 192.168.4.1" in result.stdout


def test_effects_command():
    result = runner.invoke(cli.app, ["effects"])
    assert result.exit_code == 0
    assert result.stdout.split() == ["mix", "plasma", "sweep"]


def test_stream_command(monkeypatch):
    monkeypatch.setattr(cli, "XledService", FakeService)
    result = runner.invoke(cli.app, ["stream", "192.168.4.1", "--effect", "plasma"])
    assert result.exit_code == 0
    assert "Stopped after 42 frames" in result.stdout


def test_stream_error_is_clean(monkeypatch):
    class FailingService(FakeService):
        def stream(self, effect=None, *, stop=None):
            from xledctl.core.errors import AuthError

            raise AuthError("Login request failed: connection refused")

    monkeypatch.setattr(cli, "XledService", FailingService)
    result = runner.invoke(cli.app, ["stream", "192.168.4.1"])
    assert result.exit_code == 1
    assert "Error: Login request failed: connection refused" in result.stderr
    assert "Traceback" not in result.stdout
    assert "Traceback" not in result.stderr


def test_invalid_config_is_reported(monkeypatch, tmp_path):
    monkeypatch.setattr(cli, "XledService", FakeService)
    config = tmp_path / "bad.yaml"
    config.write_text("udp_port: -1\n", encoding="utf-8")

    result = runner.invoke(cli.app, ["stream", "192.168.4.1", "--config", str(config)])
    assert result.exit_code == 1
    assert "Error: Schema validation failed" in result.stderr
