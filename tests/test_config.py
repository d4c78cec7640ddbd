from __future__ import annotations

from pathlib import Path

import pytest

from xledctl.core.config import load_config
from xledctl.core.errors import ConfigLoadError, ConfigValidationError
from xledctl.core.model import StreamConfig


def _write_config(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


@pytest.fixture
def config_home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
    return tmp_path / "cfg" / "xledctl"


def test_defaults_without_config_file(config_home: Path) -> None:
    loaded = load_config()
    assert loaded.source is None
    assert loaded.config == StreamConfig()


def test_load_from_xdg_config_dir(config_home: Path) -> None:
    _write_config(
        config_home / "config.yaml",
        """
effect: plasma
gamma: 2.5
http_timeout_s: 2.0
""",
    )

    loaded = load_config()
    assert loaded.source == config_home / "config.yaml"
    assert loaded.config.effect == "plasma"
    assert loaded.config.gamma == 2.5
    assert loaded.config.http_timeout_s == 2.0
    assert loaded.config.udp_port == 7777


def test_empty_file_uses_defaults(config_home: Path) -> None:
    _write_config(config_home / "config.yml", "")
    assert load_config().config == StreamConfig()


def test_schema_violation_rejected(config_home: Path) -> None:
    _write_config(config_home / "config.yaml", "udp_port: 0\n")
    with pytest.raises(ConfigValidationError) as exc:
        load_config()
    assert "udp_port" in str(exc.value)


def test_unknown_key_rejected(config_home: Path) -> None:
    _write_config(config_home / "config.yaml", "frame_rate: 60\n")
    with pytest.raises(ConfigValidationError):
        load_config()


def test_duplicate_yaml_keys_rejected(config_home: Path) -> None:
    _write_config(
        config_home / "config.yaml",
        """
effect: mix
effect: sweep
""",
    )
    with pytest.raises(ConfigValidationError):
        load_config()


def test_non_mapping_root_rejected(tmp_path: Path) -> None:
    path = tmp_path / "list.yaml"
    _write_config(path, "- mix\n- sweep\n")
    with pytest.raises(ConfigValidationError):
        load_config(path)


def test_explicit_missing_path_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigLoadError):
        load_config(tmp_path / "missing.yaml")
