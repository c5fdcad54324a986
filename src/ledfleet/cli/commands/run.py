"""Run command - renders a source onto the fleet until stopped."""

import logging
from pathlib import Path

import click

from ledfleet.core import FrameScheduler
from ledfleet.devices import WledMetadataClient
from ledfleet.exceptions import ConfigurationError, ErrorContext, format_error_for_display
from ledfleet.models import AppConfig, Color, LayoutConfig
from ledfleet.orchestration import AutoRetry, FleetOrchestrator
from ledfleet.sources import FiniteSource, create_source, source_names

from ..display import show_error

logger = logging.getLogger(__name__)


def parse_color(ctx, param, value: str | None) -> Color | None:
    """Click callback turning 'R,G,B' or '#RRGGBB' into a Color."""
    if value is None:
        return None
    try:
        return Color.parse(value)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


@click.command()
@click.argument(
    "layout_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=False,
)
@click.option(
    "--source", "-s",
    type=click.Choice(source_names()),
    default="color-test",
    help="Pixel source to show (default: color-test)",
)
@click.option(
    "--color", "-c",
    callback=parse_color,
    default=None,
    help="Color for the solid source, as R,G,B or #RRGGBB",
)
@click.option("--fps", type=click.IntRange(1, 240), default=None, help="Target frame rate")
@click.option(
    "--brightness", "-b",
    type=click.FloatRange(0.0, 1.0),
    default=None,
    help="Global brightness, 0.0 to 1.0",
)
@click.option(
    "--frames", "-n",
    type=click.IntRange(min=1),
    default=None,
    help="Stop after this many frames (default: run until Ctrl+C)",
)
@click.option(
    "--retry-interval",
    type=click.FloatRange(min=0.0),
    default=None,
    help="Seconds between reconnect attempts for failed panels (0 = never)",
)
@click.option("--no-metadata", is_flag=True, help="Do not query panels over HTTP before connecting")
def run(
    layout_path: Path | None,
    source: str,
    color: Color | None,
    fps: int | None,
    brightness: float | None,
    frames: int | None,
    retry_interval: float | None,
    no_metadata: bool,
):
    """
    Render a pixel source onto every panel of a layout.

    Connects all panels in parallel, reports which ones failed, then
    renders until Ctrl+C (or until --frames frames were shown). Panels
    that failed to connect are retried in the background. On exit every
    panel is blacked out.

    LAYOUT_PATH defaults to the last layout used.

    \b
    Examples:
      ledfleet run wall.json
      ledfleet run wall.json --source solid --color 255,0,0 --brightness 0.3
      ledfleet run wall.json --source identify --frames 600
    """
    orchestrator: FleetOrchestrator | None = None
    scheduler: FrameScheduler | None = None
    auto_retry: AutoRetry | None = None
    metadata: WledMetadataClient | None = None

    try:
        app_config = AppConfig.load_or_default()
        if layout_path is None:
            if app_config.last_layout is None:
                raise ConfigurationError(
                    "No layout file given",
                    recovery_hint="Pass a layout file: ledfleet run LAYOUT_PATH",
                )
            layout_path = app_config.last_layout

        layout_config = LayoutConfig.load(layout_path)
        with ErrorContext("remember last layout", logger_instance=logger, re_raise=False):
            app_config.model_copy(update={"last_layout": layout_path.resolve()}).save()

        overrides = {"fps": fps, "brightness": brightness, "retry_interval": retry_interval}
        settings = app_config.model_copy(
            update={k: v for k, v in overrides.items() if v is not None}
        )
        if no_metadata:
            settings = settings.model_copy(update={"metadata_enabled": False})

        pixel_source = create_source(source, layout_config, color)
        if frames is not None:
            pixel_source = FiniteSource(pixel_source, frames)

        if settings.metadata_enabled:
            metadata = WledMetadataClient(
                connect_timeout=settings.metadata_connect_timeout,
                read_timeout=settings.metadata_read_timeout,
            )
        orchestrator = FleetOrchestrator.for_layout(layout_config, settings, metadata)

        click.echo(f"Connecting {len(layout_config.panels)} panel(s)...")
        result = orchestrator.connect_all(layout_config.panels)
        click.echo(str(orchestrator.status()))
        for failure in result.failed:
            message, _ = format_error_for_display(failure.error)
            click.echo(f"  [FAIL] {failure.panel_id}: {message}", err=True)

        if result.failed and settings.retry_interval > 0:
            auto_retry = AutoRetry(orchestrator, settings.retry_interval)
            auto_retry.start()
            click.echo(f"Retrying failed panels every {settings.retry_interval:g}s")

        scheduler = FrameScheduler(
            pixel_source,
            orchestrator,
            layout_config.canvas_size,
            fps=settings.fps,
            brightness=settings.brightness,
        )
        scheduler.start()
        click.echo(f"Running '{source}' at {settings.fps} fps. Press Ctrl+C to stop.")

        while not scheduler.wait(0.5):
            pass

        if scheduler.error is not None:
            raise scheduler.error
        click.echo(f"Finished after {scheduler.frames_rendered} frames")

    except KeyboardInterrupt:
        logger.info("Run interrupted by user")
        click.echo("\nShutting down...", err=True)
    except click.Abort:
        raise
    except Exception as e:
        logger.exception("Error running fleet")
        show_error(e)
    finally:
        if auto_retry is not None:
            auto_retry.stop()
        if scheduler is not None:
            scheduler.stop()
        if orchestrator is not None:
            orchestrator.shutdown()
        if metadata is not None:
            metadata.close()
