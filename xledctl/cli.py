"""Typer CLI entrypoint."""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from xledctl.core.config import load_config
from xledctl.core.errors import XledError
from xledctl.core.service import XledService
from xledctl.effects.registry import available_effects

app = typer.Typer(help="Stream real-time frames to networked addressable-LED controllers")


def _build_service(address: str, config_path: Path | None = None) -> XledService:
    loaded = load_config(config_path)
    if loaded.source is not None:
        typer.echo(f"Using config {loaded.source}", err=True)
    return XledService(address, config=loaded.config)


@app.command("info")
def show_info(address: str = typer.Argument(..., help="Device IP address or hostname")) -> None:
    """Show firmware version, LED count, frame rate, and current mode."""
    try:
        service = _build_service(address)
        version = service.get_firmware_version()
        status = service.get_status()
        mode = service.get_mode()
        typer.echo(f"Device: {status.device_name or address}")
        typer.echo(f"  firmware: {version}")
        typer.echo(f"  leds: {status.led_count}")
        typer.echo(f"  frame rate: {status.measured_frame_rate:g} fps")
        typer.echo(f"  mode: {mode}")
    except XledError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("mode")
def device_mode(
    address: str = typer.Argument(..., help="Device IP address or hostname"),
    mode: str | None = typer.Argument(None),
) -> None:
    """Print the device mode, or set it when MODE is given."""
    try:
        service = _build_service(address)
        if mode is None:
            typer.echo(service.get_mode())
            return
        service.set_mode(mode)
        typer.echo(f"Set mode={mode} on {address}")
    except XledError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("effects")
def list_effects() -> None:
    """List bundled effects."""
    for name in available_effects():
        typer.echo(name)


@app.command("stream")
def stream(
    address: str = typer.Argument(..., help="Device IP address or hostname"),
    effect: str | None = typer.Option(None, "--effect", help="Effect name (see 'effects')"),
    config: Path | None = typer.Option(None, "--config", help="Path to a YAML config file"),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level"),
) -> None:
    """Stream an effect until Ctrl-C, then restore the device's previous mode."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    try:
        service = _build_service(address, config)
        streamer = service.stream(effect)
        typer.echo(f"Stopped after {streamer.frames_sent} frames")
    except XledError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


def run() -> None:
    app()


if __name__ == "__main__":
    run()
