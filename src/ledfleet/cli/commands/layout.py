"""Layout commands: inspect and validate layout files."""

import logging
from pathlib import Path

import click

from ledfleet.models import LayoutConfig

from ..display import describe_layout, show_error

logger = logging.getLogger(__name__)

layout_path_argument = click.argument(
    "layout_path", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)


@click.group(name="layout")
def layout():
    """Inspect layout files."""
    pass


@layout.command(name="show")
@layout_path_argument
def show_layout(layout_path: Path):
    """Print the canvas size and every panel of a layout."""
    try:
        layout_config = LayoutConfig.load(layout_path)
    except Exception as e:
        logger.exception(f"Failed to load layout {layout_path}")
        show_error(e)

    click.echo(f"Layout: {layout_path}")
    describe_layout(layout_config)


@layout.command(name="check")
@layout_path_argument
def check_layout(layout_path: Path):
    """
    Validate a layout file without touching the network.

    Exits with status 1 if the file is invalid.
    """
    try:
        layout_config = LayoutConfig.load(layout_path)
    except Exception as e:
        logger.exception(f"Invalid layout {layout_path}")
        show_error(e)

    click.echo(
        f"[OK] {layout_path}: {len(layout_config.panels)} panels, "
        f"canvas {layout_config.width}x{layout_config.height}"
    )


@layout.command(name="example")
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing file")
def example_layout(output: Path, force: bool):
    """Write a sample 2x2 layout of 16x16 panels to OUTPUT."""
    if output.exists() and not force:
        raise click.ClickException(f"{output} already exists (use --force to overwrite)")
    try:
        LayoutConfig.default().save(output)
    except Exception as e:
        logger.exception(f"Failed to write {output}")
        show_error(e)
    click.echo(f"Wrote example layout to {output}")
