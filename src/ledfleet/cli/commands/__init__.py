"""CLI commands for ledfleet."""

from .blackout import blackout
from .config import config
from .layout import layout
from .run import run
from .verify import verify

__all__ = ["blackout", "config", "layout", "run", "verify"]
