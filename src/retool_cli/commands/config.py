"""Config commands - show, set and unset CLI configuration."""

import click

from ..config import CONFIG_KEYS, get_config_path, load_config, save_config, unset_config
from ..decorators import handle_cli_errors
from ..formatters import print_config


@click.group("config")
def config_group() -> None:
    """Manage CLI configuration."""
    pass


@config_group.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show current configuration and where each value came from."""
    if not ctx.obj["json_output"]:
        click.echo(f"Config file: {get_config_path()}\n")
    print_config(load_config(), json_output=ctx.obj["json_output"])


@config_group.command("set")
@click.argument("key", type=click.Choice(CONFIG_KEYS))
@click.argument("value")
@handle_cli_errors
def config_set(key: str, value: str) -> None:
    """Set a config value in the config file."""
    save_config(key, value)
    click.echo(f"Set {key} = {value}")


@config_group.command("unset")
@click.argument("key", type=click.Choice(CONFIG_KEYS))
def config_unset(key: str) -> None:
    """Remove a config value from the config file."""
    if unset_config(key):
        click.echo(f"Unset {key}")
    else:
        click.echo(f"{key} is not set in the config file")
