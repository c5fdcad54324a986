"""Config commands: show the stored application settings."""

import click

from ledfleet.models import AppConfig

from ..display import show_error


@click.group(name="config")
def config():
    """Show application settings."""
    pass


@config.command(name="show")
def show_config():
    """Print every setting with its current value."""
    path = AppConfig.default_path()
    try:
        app_config = AppConfig.load_or_default(path)
    except Exception as e:
        show_error(e)

    source = path if path.exists() else "defaults (no config file yet)"
    click.echo(f"Configuration: {source}\n")
    for name, field in AppConfig.model_fields.items():
        value = getattr(app_config, name)
        click.echo(f"  {name:<26} {value!s:<12} {field.description or ''}")


@config.command(name="path")
def config_path():
    """Print where the config file lives."""
    click.echo(str(AppConfig.default_path()))
