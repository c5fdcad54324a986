"""Allow `python -m ledfleet`."""

from ledfleet.cli.main import cli

if __name__ == "__main__":
    cli()
