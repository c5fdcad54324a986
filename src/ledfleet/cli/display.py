"""Shared output helpers for CLI commands."""

import logging
import sys
from pathlib import Path
from typing import NoReturn

import click

from ledfleet.exceptions import format_error_for_display
from ledfleet.models import LayoutConfig, TransportProtocol

logger = logging.getLogger(__name__)

DEFAULT_LOG_PATH = Path.home() / ".ledfleet" / "logs" / "ledfleet.log"


def current_log_path() -> Path:
    """Log file chosen by the top-level command, or the default one."""
    ctx = click.get_current_context(silent=True)
    while ctx is not None:
        if isinstance(ctx.obj, dict) and "log_path" in ctx.obj:
            return ctx.obj["log_path"]
        ctx = ctx.parent
    return DEFAULT_LOG_PATH


def show_error(error: Exception) -> NoReturn:
    """
    Print an error without a traceback and exit with status 1.

    The full traceback goes to the log file only.
    """
    user_message, recovery_hint = format_error_for_display(error)

    click.echo("\n" + "=" * 70, err=True)
    click.echo(f"ERROR: {user_message}", err=True)
    click.echo("=" * 70, err=True)

    if recovery_hint:
        click.echo(f"\n{recovery_hint}", err=True)

    click.echo(f"\nFor details, check the log file: {current_log_path()}", err=True)
    click.echo("For logging options, run: ledfleet --help", err=True)
    sys.exit(1)


def describe_layout(layout: LayoutConfig) -> None:
    """Print the canvas size and one row per panel."""
    total_leds = sum(p.led_count for p in layout.panels)
    click.echo(
        f"Canvas: {layout.width}x{layout.height} "
        f"({len(layout.panels)} panels, {total_leds} LEDs)\n"
    )
    click.echo(
        f"  {'ID':<12} {'Address':<22} {'Proto':<7} {'Origin':<9} {'Size':<7} "
        f"{'Universe':<9} Wiring"
    )
    for panel in layout.panels:
        wiring = panel.wiring
        flags = [wiring.start_corner.value, wiring.order.value]
        if wiring.serpentine:
            flags.append(f"serpentine ({wiring.serpentine_mode.value})")
        if wiring.mirror_x:
            flags.append("mirrored")
        universe = str(panel.universe) if panel.protocol is TransportProtocol.ARTNET else "-"
        origin = f"{panel.origin[0]},{panel.origin[1]}"
        size = f"{panel.width}x{panel.height}"
        click.echo(
            f"  {panel.id:<12} {panel.address:<22} {panel.protocol.value:<7} {origin:<9} "
            f"{size:<7} {universe:<9} {', '.join(flags)}"
        )
