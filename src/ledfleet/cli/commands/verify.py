"""Verify command - compares a layout with what the panels report."""

import logging
import sys
from pathlib import Path

import click

from ledfleet.devices import WledMetadataClient, find_mismatches
from ledfleet.exceptions import MetadataError
from ledfleet.models import AppConfig, LayoutConfig

from ..display import show_error

logger = logging.getLogger(__name__)


@click.command()
@click.argument("layout_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def verify(layout_path: Path):
    """
    Ask every panel for its metadata and check it against the layout.

    Reports the LED count, matrix size and, for Art-Net panels, the DMX
    universe, start address and port. Exits with status 1 if any panel
    is unreachable or disagrees with the layout.
    """
    try:
        app_config = AppConfig.load_or_default()
        layout_config = LayoutConfig.load(layout_path)
    except Exception as e:
        logger.exception("Failed to load configuration")
        show_error(e)

    client = WledMetadataClient(
        connect_timeout=app_config.metadata_connect_timeout,
        read_timeout=app_config.metadata_read_timeout,
    )
    problems = 0
    try:
        for panel in layout_config.panels:
            click.echo(f"{panel.id} ({panel.host}):")
            try:
                metadata = client.fetch(panel)
            except MetadataError as e:
                problems += 1
                click.echo(f"  [FAIL] {e.user_message}")
                continue

            name = metadata.name or "unnamed"
            version = metadata.version or "unknown version"
            click.echo(f"  Device: {name} ({version})")

            issues = find_mismatches(panel, metadata)
            if not issues:
                click.echo("  [OK] Matches layout")
            for issue in issues:
                click.echo(f"  [WARN] {issue}")
            problems += bool(issues)
    finally:
        client.close()

    total = len(layout_config.panels)
    click.echo(f"\n{total - problems}/{total} panels OK")
    if problems:
        sys.exit(1)
