"""Apps command - list, create, delete and export Retool apps.

Flags, checked in this order:
  retool apps -l [folder]        # list root level, or one folder
  retool apps -r                 # list every app
  retool apps -t                 # create an app for a Retool DB table
  retool apps -c [name]          # create an empty app
  retool apps -d <name>...       # delete apps
  retool apps -e <name>...       # export apps to <name>.json
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import click

from ..apps import select_folder, select_root
from ..client import RetoolClient
from ..config import CLIConfig
from ..credentials import CredentialRecord, CredentialStore, resolve_db_credentials
from ..decorators import handle_cli_errors, requires_credentials
from ..errors import RetoolCLIError, UserCancelledError
from ..formatters import print_app_created, print_apps
from ..prompts import collect_app_name, collect_table_name, confirm_async
from ..scaffold import RetoolAppService, RetoolTableService
from ..shared.logging import get_logger
from ..shared.tasks import DetachedTasks
from ..telemetry import log_usage
from ..utils import merge_variadic
from ..version import __version__

logger = get_logger(__name__)

NO_FLAG_MESSAGE = "No flag specified. See `retool apps --help` for available flags."


@click.command("apps")
@click.option(
    "-l",
    "--list",
    "list_folder",
    is_flag=False,
    flag_value="",
    default=None,
    help="List folders and apps at root level, or the apps in one folder. "
    "Usage: retool apps -l [folder-name]",
)
@click.option("-r", "--list-recursive", is_flag=True, help="List all apps and folders")
@click.option(
    "-c",
    "--create",
    "create_name",
    is_flag=False,
    flag_value="",
    default=None,
    help="Create a new app, prompting for the name if not given. Usage: retool apps -c [app-name]",
)
@click.option(
    "-t",
    "--create-from-table",
    is_flag=True,
    help="Create a new app to visualize a Retool DB table",
)
@click.option(
    "-d",
    "--delete",
    "delete_names",
    multiple=True,
    help="Delete apps. Usage: retool apps -d <app-name> [app-name...]",
)
@click.option(
    "-e",
    "--export",
    "export_names",
    multiple=True,
    help="Export app JSON to <app-name>.json. Usage: retool apps -e <app-name> [app-name...]",
)
@click.option("--force", is_flag=True, help="Delete without confirmation")
@click.argument("names", nargs=-1)
@click.pass_context
@handle_cli_errors
@requires_credentials
def apps_command(
    ctx: click.Context,
    list_folder: str | None,
    list_recursive: bool,
    create_name: str | None,
    create_from_table: bool,
    delete_names: tuple[str, ...],
    export_names: tuple[str, ...],
    force: bool,
    names: tuple[str, ...],
    credentials: CredentialRecord,
) -> None:
    """Interface with Retool apps.

    \b
    Examples:
      retool apps -l
      retool apps -l Reports
      retool apps -c Dashboard
      retool apps -d "orders App" --force
      retool apps -e Dashboard Inventory
    """
    config: CLIConfig = ctx.obj["config"]
    store: CredentialStore = ctx.obj["store"]
    json_output: bool = ctx.obj["json_output"]

    if delete_names:
        delete_names = merge_variadic(delete_names, names, "-d/--delete")
    else:
        export_names = merge_variadic(export_names, names, "-e/--export")

    listing = list_folder is not None or list_recursive
    table_name = app_name = None
    if not listing:
        if create_from_table:
            table_name = collect_table_name().strip()
            app_name = collect_app_name()
        elif create_name is not None:
            app_name = create_name.strip() or collect_app_name()
        elif not delete_names and not export_names:
            click.echo(NO_FLAG_MESSAGE, err=True)
            return

    asyncio.run(
        _run_apps(
            credentials=credentials,
            store=store,
            config=config,
            json_output=json_output,
            list_folder=list_folder,
            list_recursive=list_recursive,
            table_name=table_name,
            app_name=app_name,
            delete_names=delete_names,
            export_names=export_names,
            force=force,
        )
    )


async def _run_apps(
    credentials: CredentialRecord,
    store: CredentialStore,
    config: CLIConfig,
    json_output: bool,
    list_folder: str | None,
    list_recursive: bool,
    table_name: str | None,
    app_name: str | None,
    delete_names: tuple[str, ...],
    export_names: tuple[str, ...],
    force: bool,
) -> None:
    """Run the selected apps action against Retool."""
    detached = DetachedTasks()

    async with RetoolClient(credentials, timeout=config.timeout) as client:
        log_usage(client, detached, "apps", __version__, enabled=config.telemetry)
        apps_service = RetoolAppService(client, credentials)
        try:
            if list_folder is not None or list_recursive:
                await _list_apps(apps_service, list_folder, list_recursive, json_output)
            elif table_name is not None:
                # Only this action needs the Retool DB identifiers
                resolved = await resolve_db_credentials(
                    credentials, client, store, force_refresh=config.refresh_db_credentials
                )
                table = await RetoolTableService(client, resolved).describe_table(table_name)
                result = await RetoolAppService(client, resolved).create_app_for_table(
                    app_name or "", table.name, table.search_column
                )
                print_app_created(result, json_output)
            elif app_name is not None:
                print_app_created(await apps_service.create_app(app_name), json_output)
            elif delete_names:
                await _delete_apps(apps_service, delete_names, force, json_output)
            else:
                await _export_apps(apps_service, export_names, json_output)
        finally:
            await detached.settle(config.detached_grace)


async def _list_apps(
    apps_service: RetoolAppService,
    list_folder: str | None,
    list_recursive: bool,
    json_output: bool,
) -> None:
    apps, folders = await apps_service.list_apps_and_folders()

    if list_folder:
        listing = select_folder(apps, folders, list_folder)
        if listing is None:
            click.echo(f"No folder named {list_folder} found.", err=True)
            return
        if listing.empty:
            click.echo(f"No apps found in {list_folder}.", err=True)
            return
    else:
        listing = select_root(apps, folders, recursive=list_recursive)
        if listing.empty:
            click.echo("No folders or apps found.", err=True)
            return

    print_apps(listing, json_output)


async def _delete_apps(
    apps_service: RetoolAppService,
    names: tuple[str, ...],
    force: bool,
    json_output: bool,
) -> None:
    """Delete each app in turn, stopping at the first failure or declined prompt."""
    for name in names:
        if not force and not await confirm_async(f"Are you sure you want to delete {name}?"):
            raise UserCancelledError()
        await apps_service.delete_app(name)
        logger.info("app_deleted", app=name)
        if json_output:
            click.echo(json.dumps({"deleted": name}))
        else:
            click.echo(f"Deleted {name} app. 🗑️")


async def _export_apps(
    apps_service: RetoolAppService,
    names: tuple[str, ...],
    json_output: bool,
) -> None:
    for name in names:
        data = await apps_service.export_app(name)
        path = Path(f"{name}.json")
        try:
            path.write_bytes(data)
        except OSError as e:
            raise RetoolCLIError(f"Error exporting app {name} to {path}: {e}")
        logger.info("app_exported", app=name, path=str(path))
        if json_output:
            click.echo(json.dumps({"exported": name, "path": str(path)}))
        else:
            click.echo(f"Exported {name} app. 📦")
