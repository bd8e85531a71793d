"""CLI main entry point."""

import click

from .commands.apps import apps_command
from .commands.auth import login_command, logout_command, whoami_command
from .commands.config import config_group
from .commands.scaffold import scaffold_command
from .config import load_config
from .credentials.store import CredentialStore
from .shared.logging import configure_logging, level_for_verbosity
from .version import __version__


@click.group()
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-vv for debug)")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON (log lines too)")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, writable=True),
    help="Write log lines to this file instead of stderr",
)
@click.pass_context
def cli(ctx: click.Context, verbose: int, json_output: bool, log_file: str | None) -> None:
    """Retool CLI: scaffold Retool DB tables, workflows and apps."""
    configure_logging(level_for_verbosity(verbose), log_file=log_file, json_output=json_output)

    config = load_config()

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config"] = config
    ctx.obj["json_output"] = json_output or config.output_format == "json"
    # Commands read the credential record through this store; no global accessor
    ctx.obj["store"] = CredentialStore()


@cli.command()
def version() -> None:
    """Show version information."""
    click.echo(f"retool-cli version {__version__}")


cli.add_command(login_command)
cli.add_command(logout_command)
cli.add_command(whoami_command)
cli.add_command(scaffold_command)
cli.add_command(apps_command)
cli.add_command(config_group)


def main() -> None:
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
