"""Command line interface for ledfleet."""

from .main import cli

__all__ = ["cli"]
