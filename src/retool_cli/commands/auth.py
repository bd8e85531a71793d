"""Credential commands - login, logout, whoami."""

from __future__ import annotations

import asyncio

import click

from ..client import RetoolClient
from ..config import CLIConfig
from ..credentials import CredentialRecord, CredentialStore, resolve_db_credentials
from ..decorators import handle_cli_errors, requires_credentials
from ..errors import RetoolDBNotFoundError
from ..formatters import print_credentials, print_warning
from ..prompts import ask_for_cookies
from ..shared.tasks import DetachedTasks
from ..telemetry import log_usage
from ..version import __version__


@click.command("login")
@click.option("--domain", help="Retool domain, e.g. my-org.retool.com (no https://)")
@click.option("--xsrf", help="XSRF token cookie value")
@click.option("--access-token", help="accessToken cookie value")
@click.pass_context
@handle_cli_errors
def login_command(
    ctx: click.Context,
    domain: str | None,
    xsrf: str | None,
    access_token: str | None,
) -> None:
    """Log in by saving session cookies copied from the browser.

    Prompts for each value not given as a flag.
    """
    store: CredentialStore = ctx.obj["store"]

    record = ask_for_cookies(domain=domain, xsrf=xsrf, access_token=access_token)
    store.persist(record)
    click.echo("Successfully saved credentials.")


@click.command("logout")
@click.pass_context
@handle_cli_errors
def logout_command(ctx: click.Context) -> None:
    """Log out by deleting saved credentials."""
    store: CredentialStore = ctx.obj["store"]

    if not store.erase():
        click.echo("No credentials found! To log in, run: retool login")
        return
    click.echo("Successfully logged out.")


@click.command("whoami")
@click.option(
    "--refresh-credentials",
    is_flag=True,
    help="Re-fetch Retool DB identifiers even if they are already saved",
)
@click.pass_context
@handle_cli_errors
@requires_credentials
def whoami_command(
    ctx: click.Context,
    refresh_credentials: bool,
    credentials: CredentialRecord,
) -> None:
    """Show the logged-in account and its Retool DB identifiers."""
    config: CLIConfig = ctx.obj["config"]
    store: CredentialStore = ctx.obj["store"]

    async def _whoami() -> CredentialRecord:
        detached = DetachedTasks()
        async with RetoolClient(credentials, timeout=config.timeout) as client:
            log_usage(client, detached, "whoami", __version__, enabled=config.telemetry)
            try:
                resolved = await resolve_db_credentials(
                    credentials,
                    client,
                    store,
                    force_refresh=refresh_credentials or config.refresh_db_credentials,
                )
            except RetoolDBNotFoundError as e:
                # Not fatal here: show what we have
                print_warning(e.message)
                resolved = credentials
            finally:
                await detached.settle(config.detached_grace)
        return resolved or credentials

    record = asyncio.run(_whoami())
    print_credentials(record, json_output=ctx.obj["json_output"])
