"""Typer CLI entrypoint."""

from __future__ import annotations

import logging
import shutil

import typer

from btprofile.core.address import format_address
from btprofile.core.errors import BtprofileError
from btprofile.core.model import AudioDevice, PipewireDeviceId
from btprofile.core.service import ProfileService

app = typer.Typer(help="Switch Bluetooth audio profiles on PipeWire or PulseAudio")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log backend commands"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _build_service() -> ProfileService:
    service = ProfileService()
    for warning in getattr(service, "runtime_warnings", ()):
        typer.echo(f"Warning: {warning}", err=True)
    return service


def _describe_id(device: AudioDevice) -> str:
    if isinstance(device.id, PipewireDeviceId):
        return f"object {device.id.object_id}"
    return f"card {device.id.card_name}"


@app.command("show")
def show(address: str) -> None:
    """Show the audio device and available profiles for ADDRESS."""
    try:
        service = _build_service()
        device = service.get_device(address)
        typer.echo(f"{format_address(address)}: {device.backend} {_describe_id(device)}")
        active = device.active_profile()
        for profile in device.profiles:
            marker = "*" if profile == active else " "
            typer.echo(f" {marker} {profile.index}: {profile.name} ({profile.description})")
    except BtprofileError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("set")
def set_profile(
    address: str,
    profile: str | None = typer.Argument(None, help="Profile name or index"),
) -> None:
    """Switch ADDRESS to PROFILE.

    If PROFILE is omitted, prints the available profiles for ADDRESS.
    """
    try:
        service = _build_service()
        if profile is None:
            device = service.get_device(address)
            names = ", ".join(p.name for p in device.profiles)
            typer.echo(f"Available profiles for {format_address(address)}: {names}")
            return
        result = service.set_profile(address, profile)
        typer.echo(f"{result.message}: {format_address(address)} -> {result.profile.name}")
    except BtprofileError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("check")
def check() -> None:
    """Report which audio backend tools are installed."""
    try:
        service = _build_service()
    except BtprofileError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None

    commands = service.config.commands
    found: dict[str, bool] = {}
    for tool in (commands.pw_dump, commands.wpctl, commands.pactl):
        path = shutil.which(tool)
        found[tool] = path is not None
        typer.echo(f"{tool}: {path or 'not found'}")

    # PipeWire is probed first, so a dump tool without its control tool
    # finds devices that can never be switched.
    if found[commands.pw_dump] and not found[commands.wpctl]:
        typer.echo(f"Error: {commands.pw_dump} found but {commands.wpctl} is missing", err=True)
        raise typer.Exit(code=1)
    if not found[commands.pw_dump] and not found[commands.pactl]:
        typer.echo("Error: no audio backend tools found", err=True)
        raise typer.Exit(code=1)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
