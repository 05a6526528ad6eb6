"""
AdScope CLI
============

Click-based command-line interface for the AdScope advertisement
decoder.

Commands:
    adscope scan                 Scan and decode live BLE advertisements
    adscope decode HEX           Decode one manufacturer-data blob
    adscope replay FILE          Decode recorded discovery events (JSON lines)

Common options:
    --config PATH       TOML configuration file
    --quiet             Suppress console output
    --verbose           Debug logging on stderr
    --json              One JSON record per line instead of text blocks

References:
    - Click Documentation: https://click.palletsprojects.com/
"""

from __future__ import annotations

import asyncio
import sys
from typing import Any, Optional

import click

from shared.config import AdScopeConfig
from shared.console import ScopeConsole
from shared.logger import configure_logging

from adscope import __version__
from adscope.core.errors import AdScopeError


def _run_async(coro):
    """Run an async coroutine from synchronous Click commands."""
    return asyncio.run(coro)


class HexBytes(click.ParamType):
    """Click parameter accepting hex such as ``4c000215``, ``4c 00 02`` or ``0x4c00``."""

    name = "hex"

    def convert(self, value: Any, param: Optional[click.Parameter], ctx: Optional[click.Context]) -> bytes:
        if isinstance(value, bytes):
            return value
        text = str(value).strip()
        if text.lower().startswith("0x"):
            text = text[2:]
        text = text.replace(":", "").replace("-", "")
        try:
            return bytes.fromhex(text)
        except ValueError:
            self.fail(f"{value!r} is not a valid hex string", param, ctx)


def _engine(ctx: click.Context, json_lines: bool):
    from adscope.core.engine import AdScopeEngine

    return AdScopeEngine(
        config=ctx.obj["config"],
        console=ctx.obj["console"],
        json_lines=json_lines or None,
    )


# ---------------------------------------------------------------------------
# CLI Group
# ---------------------------------------------------------------------------


@click.group(
    name="adscope",
    help=(
        "ADSCOPE - BLE Advertisement Decoder\n\n"
        "Observe Bluetooth Low Energy advertisements and render each one "
        "as a structured report: signal estimate, manufacturer data with "
        "vendor-aware decoding, service UUIDs and service data."
    ),
)
@click.version_option(__version__, prog_name="adscope")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to AdScope configuration file (TOML).",
)
@click.option(
    "--quiet",
    is_flag=True,
    default=False,
    help="Suppress console output.",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    default=False,
    help="Enable debug logging on stderr.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str], quiet: bool, verbose: bool) -> None:
    """AdScope - main CLI entry point."""
    ctx.ensure_object(dict)

    try:
        config = AdScopeConfig.load(config_path) if config_path else AdScopeConfig.load()
    except (FileNotFoundError, ValueError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    settings = config.global_settings
    configure_logging(
        log_level="DEBUG" if verbose or settings.debug else settings.log_level,
        log_file=settings.log_file or None,
        json_logs=settings.log_json,
    )

    ctx.obj["config"] = config
    ctx.obj["console"] = ScopeConsole(quiet=quiet)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@cli.command(
    name="scan",
    help=(
        "Scan and decode live BLE advertisements.\n\n"
        "Every advertisement received is decoded and printed as it "
        "arrives. Press Ctrl+C to stop when no duration is given."
    ),
)
@click.option(
    "--duration", "-d",
    type=click.IntRange(min=0),
    default=None,
    help="Scan duration in seconds (0 = until interrupted; default from config).",
)
@click.option(
    "--json", "json_lines",
    is_flag=True,
    default=False,
    help="Print one JSON record per line.",
)
@click.pass_context
def scan(ctx: click.Context, duration: Optional[int], json_lines: bool) -> None:
    """Scan for BLE advertisements."""
    engine = _engine(ctx, json_lines)
    try:
        _run_async(engine.scan(duration=duration))
    except AdScopeError as exc:
        raise click.ClickException(str(exc)) from exc
    except KeyboardInterrupt:
        click.echo("\nStopping scan.", err=True)


@cli.command(
    name="decode",
    help=(
        "Decode one manufacturer-data blob.\n\n"
        "HEX is the complete manufacturer-specific data including the "
        "little-endian company identifier, e.g. 0388ec000a0200."
    ),
)
@click.argument("data", type=HexBytes())
@click.option(
    "--json", "json_lines",
    is_flag=True,
    default=False,
    help="Print the parse result as JSON.",
)
@click.pass_context
def decode(ctx: click.Context, data: bytes, json_lines: bool) -> None:
    """Decode a manufacturer-data blob given as hex."""
    _engine(ctx, json_lines).decode(data)


@cli.command(
    name="replay",
    help=(
        "Decode recorded discovery events.\n\n"
        "FILE holds one JSON object per line with peer_id, name, rssi and "
        "advertisement; byte values are hex strings."
    ),
)
@click.argument(
    "events_file",
    type=click.Path(exists=True, dir_okay=False),
)
@click.option(
    "--json", "json_lines",
    is_flag=True,
    default=False,
    help="Print one JSON record per line.",
)
@click.pass_context
def replay(ctx: click.Context, events_file: str, json_lines: bool) -> None:
    """Decode a JSON-lines file of discovery events."""
    engine = _engine(ctx, json_lines)
    try:
        engine.replay(events_file)
    except AdScopeError as exc:
        raise click.ClickException(str(exc)) from exc


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """Entry point for the AdScope CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
