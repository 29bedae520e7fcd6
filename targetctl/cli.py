"""Typer CLI entrypoint."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import typer

from targetctl.api import Client
from targetctl.core.errors import TargetctlError
from targetctl.core.model import SoundAsset, TextureAsset
from targetctl.core.settings import update_setting

app = typer.Typer(help="Target platform device registry and cook format negotiation")
settings_app = typer.Typer(help="Inspect or edit the target settings record")
app.add_typer(settings_app, name="settings")


@dataclass
class _Options:
    project: Path | None = None
    variant: str = "Linux"


@app.callback()
def main(
    ctx: typer.Context,
    project: Path | None = typer.Option(None, "--project", help="Project directory containing Config/"),
    variant: str = typer.Option("Linux", "--variant", help="Target variant name"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    ctx.obj = _Options(project=project, variant=variant)


def _options(ctx: typer.Context) -> _Options:
    return ctx.obj if isinstance(ctx.obj, _Options) else _Options()


def _build_client(ctx: typer.Context) -> Client:
    return Client(project_dir=_options(ctx).project)


def _fail(exc: TargetctlError) -> None:
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(code=1) from None


@app.command("variants")
def list_variants(ctx: typer.Context) -> None:
    """List known target variants."""
    try:
        client = _build_client(ctx)
        for variant in client.variants():
            platform = client.platform(variant)
            typer.echo(
                f"{variant}: {platform.variant_display_name()} (priority {platform.variant_priority()})"
            )
    except TargetctlError as exc:
        _fail(exc)


@app.command("devices")
def list_devices(ctx: typer.Context) -> None:
    """List known devices; the default device is marked with '*'."""
    try:
        platform = _build_client(ctx).platform(_options(ctx).variant)
        devices = platform.get_all_devices()
        if not devices:
            typer.echo("No devices registered")
            return

        default = platform.get_default_device()
        for device in devices:
            marker = "*" if default is not None and device.id == default.id else " "
            kind = "local" if device.is_local else "remote"
            user = f" user={device.username}" if device.username else ""
            typer.echo(f"{marker} {device.name} ({device.display_name}) [{kind}]{user}")
    except TargetctlError as exc:
        _fail(exc)


@app.command("show-device")
def show_device(ctx: typer.Context, name: str) -> None:
    """Show a single device by name."""
    try:
        options = _options(ctx)
        device = _build_client(ctx).require_device(name, variant=options.variant)
        typer.echo(f"id: {device.id}")
        typer.echo(f"display_name: {device.display_name}")
        typer.echo(f"local: {device.is_local}")
        typer.echo(f"credentials: {'yes' if device.has_credentials else 'no'}")
    except TargetctlError as exc:
        _fail(exc)


@app.command("add-device")
def add_device(
    ctx: typer.Context,
    name: str,
    display_name: str = typer.Option("", "--display-name", help="Friendly name (not persisted; reloads show the name)"),
    user: str = typer.Option("", "--user", help="Username for deployment"),
    password: str = typer.Option("", "--password", help="Password for deployment"),
    default: bool = typer.Option(False, "--default", help="Accepted for compatibility; has no effect"),
) -> None:
    """Register a deployment device and persist it to config."""
    try:
        platform = _build_client(ctx).platform(_options(ctx).variant)
        if not platform.add_device(name, display_name, user, password, default):
            typer.echo(f"Error: Device '{name}' already exists", err=True)
            raise typer.Exit(code=1)
        typer.echo(f"Added {name} to {platform.platform_name}")
    except TargetctlError as exc:
        _fail(exc)


@app.command("shader-formats")
def shader_formats(ctx: typer.Context) -> None:
    """Show possible, targeted, and reflection capture formats."""
    try:
        platform = _build_client(ctx).platform(_options(ctx).variant)
        typer.echo(f"possible: {', '.join(platform.possible_shader_formats()) or '<none>'}")
        typer.echo(f"targeted: {', '.join(platform.targeted_shader_formats()) or '<none>'}")
        typer.echo(f"reflection captures: {', '.join(platform.reflection_capture_formats())}")
    except TargetctlError as exc:
        _fail(exc)


@app.command("texture-formats")
def texture_formats(
    ctx: typer.Context,
    compression: str | None = typer.Option(None, "--compression", help="Resolve formats for one texture"),
    alpha: bool = typer.Option(False, "--alpha", help="Texture has an alpha channel"),
    layers: int = typer.Option(1, "--layers", min=1, help="Number of texture layers"),
) -> None:
    """Show negotiated texture formats, for one texture or for the whole target."""
    try:
        platform = _build_client(ctx).platform(_options(ctx).variant)
        if compression is not None:
            texture = TextureAsset(name="cli", compression=compression, has_alpha=alpha, layer_count=layers)
            for layer_names in platform.texture_formats_for(texture):
                typer.echo(f"texture: {', '.join(layer_names)}")
            return
        typer.echo(f"all: {', '.join(platform.all_texture_formats()) or '<none>'}")
    except TargetctlError as exc:
        _fail(exc)


@app.command("audio-format")
def audio_format(
    ctx: typer.Context,
    seekable_streaming: bool = typer.Option(False, "--seekable-streaming"),
    streaming: bool = typer.Option(False, "--streaming"),
) -> None:
    """Show the wave format chosen for a sound and every possible wave format."""
    try:
        platform = _build_client(ctx).platform(_options(ctx).variant)
        sound = SoundAsset(name="cli", is_seekable_streaming=seekable_streaming, is_streaming=streaming)
        typer.echo(f"selected: {platform.wave_format_for(sound)}")
        typer.echo(f"all: {', '.join(platform.all_wave_formats())}")
    except TargetctlError as exc:
        _fail(exc)


@app.command("sdk")
def sdk(
    ctx: typer.Context,
    has_code: bool = typer.Option(False, "--has-code", help="Project contains native code"),
) -> None:
    """Check toolchain availability and build readiness."""
    try:
        platform = _build_client(ctx).platform(_options(ctx).variant)
        installed, documentation = platform.is_sdk_installed(has_code)
        status = platform.check_requirements(has_code)
        typer.echo(f"sdk installed: {'yes' if installed else 'no'} (see {documentation})")
        typer.echo(f"ready status: {status.name}")
    except TargetctlError as exc:
        _fail(exc)


@settings_app.command("show")
def settings_show(ctx: typer.Context) -> None:
    """Print the current target settings."""
    try:
        settings = _build_client(ctx).platform(_options(ctx).variant).settings()
        typer.echo(f"TargetedRHIs: {', '.join(settings.targeted_shader_formats)}")
        typer.echo(f"bCookDXTTextures: {settings.cook_dxt}")
        typer.echo(f"bCookBCTextures: {settings.cook_bc}")
        typer.echo(f"bCookETC2Textures: {settings.cook_etc2}")
    except TargetctlError as exc:
        _fail(exc)


@settings_app.command("set")
def settings_set(ctx: typer.Context, key: str, value: str) -> None:
    """Set a target setting; TargetedRHIs takes a comma-separated list."""
    try:
        client = _build_client(ctx)
        update_setting(client.store, key, value)
        typer.echo(f"Set {key}={value}")
    except TargetctlError as exc:
        _fail(exc)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
