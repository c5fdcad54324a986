"""Main CLI entry point."""

import logging
import logging.handlers
from pathlib import Path

import click

from .commands import blackout, config, layout, run, verify

logger = logging.getLogger(__name__)

# Handlers installed by setup_logging, removed again on the next call
_installed_handlers: list[logging.Handler] = []


def resolve_log_path(debug: bool, log_file: Path | None) -> Path:
    """Pick the log file for this invocation."""
    if log_file:
        return log_file
    if debug:
        return Path.cwd() / "ledfleet-debug.log"
    return Path.home() / ".ledfleet" / "logs" / "ledfleet.log"


def setup_logging(verbose: int, debug: bool, log_file: Path | None, log_level: str) -> Path:
    """
    Configure logging for the application.

    Everything goes to a rotating log file. Warnings and errors also go to
    stderr; -v adds INFO and -vv adds DEBUG there.

    Args:
        verbose: Verbosity count (0 = WARNING, 1 = INFO, 2+ = DEBUG)
        debug: If True, log DEBUG to ./ledfleet-debug.log
        log_file: Custom log file path (optional)
        log_level: Log level for file logging (DEBUG/INFO/WARNING/ERROR)

    Returns:
        Path of the log file
    """
    if debug or verbose >= 2:
        console_level = logging.DEBUG
    elif verbose == 1:
        console_level = logging.INFO
    else:
        console_level = logging.WARNING

    file_level = logging.DEBUG if debug else getattr(logging, log_level.upper())

    log_path = resolve_log_path(debug, log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Rotating file handler (keeps last 5 files, max 10MB each)
    file_handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
    )
    file_handler.setLevel(file_level)
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    root_logger = logging.getLogger()
    for handler in _installed_handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _installed_handlers[:] = [file_handler, console_handler]

    root_logger.setLevel(min(file_level, console_level))
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    logger.info(
        f"Logging configured: file level={logging.getLevelName(file_level)}, "
        f"console level={logging.getLevelName(console_level)}, file={log_path}"
    )
    return log_path


@click.group()
@click.pass_context
@click.version_option(version="0.1.0", prog_name="ledfleet")
@click.option(
    "-v", "--verbose",
    count=True,
    help="Increase console verbosity (-v: INFO, -vv: DEBUG)",
)
@click.option(
    "--debug",
    is_flag=True,
    help="Enable debug mode (DEBUG level, logs to ./ledfleet-debug.log)",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Custom log file path",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    help="Log level for file logging (default: INFO)",
)
def cli(ctx, verbose: int, debug: bool, log_file: Path | None, log_level: str):
    """
    ledfleet - drive a fleet of WLED-style LED panels from one virtual canvas.

    Panels are described in a JSON layout file: where each panel sits on
    the canvas, how its LEDs are wired, and how to reach it (Art-Net or DDP
    over UDP).

    \b
    Examples:
      # Check a layout file
      ledfleet layout check wall.json

      # Show the test pattern on every panel
      ledfleet run wall.json

      # Light each panel in its own color
      ledfleet run wall.json --source identify

      # Compare the layout with what the controllers report
      ledfleet verify wall.json

      # Turn everything off
      ledfleet blackout wall.json

      # Enable debug logging
      ledfleet --debug run wall.json
    """
    log_path = setup_logging(verbose, debug, log_file, log_level)
    ctx.ensure_object(dict)
    ctx.obj["log_path"] = log_path


cli.add_command(run)
cli.add_command(layout)
cli.add_command(verify)
cli.add_command(blackout)
cli.add_command(config)

if __name__ == "__main__":
    cli()
