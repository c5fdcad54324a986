"""Blackout command - switches every panel of a layout off."""

import logging
from pathlib import Path

import click

from ledfleet.exceptions import format_error_for_display
from ledfleet.models import AppConfig, LayoutConfig
from ledfleet.orchestration import FleetOrchestrator

from ..display import show_error

logger = logging.getLogger(__name__)


@click.command()
@click.argument("layout_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def blackout(layout_path: Path):
    """Connect to every panel and send one all-black frame."""
    try:
        app_config = AppConfig.load_or_default()
        layout_config = LayoutConfig.load(layout_path)
    except Exception as e:
        logger.exception("Failed to load configuration")
        show_error(e)

    with FleetOrchestrator.for_layout(layout_config, app_config) as orchestrator:
        result = orchestrator.connect_all(layout_config.panels)
        report = orchestrator.blackout()

        for panel_id in report.sent:
            click.echo(f"[OK] {panel_id}")
        for failure in [*result.failed, *report.failed]:
            message, _ = format_error_for_display(failure.error)
            click.echo(f"[FAIL] {failure.panel_id}: {message}")

    click.echo(f"Blacked out {len(report.sent)}/{len(layout_config.panels)} panels")
