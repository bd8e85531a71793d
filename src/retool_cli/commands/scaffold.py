"""Scaffold command - create or delete a Retool DB table, CRUD workflow and app.

Modes, checked in this order:
  retool scaffold -d <table>              # delete table, workflow and app
  retool scaffold -f <file.csv> ...       # create from CSV files
  retool scaffold -n <table> -c <cols>    # create with the given columns
"""

from __future__ import annotations

import asyncio

import click

from ..client import RetoolClient
from ..config import CLIConfig
from ..credentials import CredentialRecord, CredentialStore, resolve_db_credentials
from ..csv_import import CSVTable, read_csv_table
from ..decorators import handle_cli_errors, requires_credentials
from ..formatters import ConsoleReporter, JsonReporter
from ..prompts import collect_column_names, collect_table_name, confirm_async
from ..scaffold import (
    RetoolAppService,
    RetoolTableService,
    RetoolWorkflowService,
    ScaffoldOrchestrator,
    split_column_args,
)
from ..shared.logging import get_logger
from ..shared.tasks import DetachedTasks
from ..telemetry import log_usage
from ..utils import merge_variadic
from ..version import __version__

logger = get_logger(__name__)


@click.command("scaffold")
@click.option(
    "-n",
    "--name",
    help="Name of table to scaffold. Usage: retool scaffold -n <table_name>",
)
@click.option(
    "-c",
    "--columns",
    multiple=True,
    help="Column names to scaffold. Usage: retool scaffold -c <col1> <col2> "
    "(commas also separate names: -c name,email)",
)
@click.option(
    "-d",
    "--delete",
    "delete_name",
    help="Delete a table, workflow and app created via scaffold. Usage: retool scaffold -d <table_name>",
)
@click.option(
    "-f",
    "--from-csv",
    "csv_paths",
    multiple=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Create a scaffold per CSV file (table named after the file). Repeatable.",
)
@click.option("--no-workflow", is_flag=True, help="Do not create the CRUD workflow")
@click.option("--force", is_flag=True, help="Delete without confirmation")
@click.option(
    "--refresh-credentials",
    is_flag=True,
    help="Re-fetch Retool DB identifiers even if they are already saved",
)
@click.argument("extra_columns", nargs=-1)
@click.pass_context
@handle_cli_errors
@requires_credentials
def scaffold_command(
    ctx: click.Context,
    name: str | None,
    columns: tuple[str, ...],
    delete_name: str | None,
    csv_paths: tuple[str, ...],
    no_workflow: bool,
    force: bool,
    refresh_credentials: bool,
    extra_columns: tuple[str, ...],
    credentials: CredentialRecord,
) -> None:
    """Scaffold a Retool DB table, CRUD workflow, and app.

    \b
    Examples:
      retool scaffold -n orders -c name email
      retool scaffold -n orders -c name,email --no-workflow
      retool scaffold -f customers.csv
      retool scaffold -d orders --force
    """
    config: CLIConfig = ctx.obj["config"]
    store: CredentialStore = ctx.obj["store"]
    columns = merge_variadic(columns, extra_columns, "-c/--columns")

    csv_tables: list[CSVTable] = []
    column_names: list[str] = []
    # Delete takes priority over --from-csv, which takes priority over -n/-c
    if not delete_name:
        if csv_paths:
            csv_tables = [read_csv_table(path) for path in csv_paths]
        else:
            name = name or collect_table_name()
            column_names = split_column_args(columns) or collect_column_names()

    asyncio.run(
        _run_scaffold(
            credentials=credentials,
            store=store,
            config=config,
            json_output=ctx.obj["json_output"],
            delete_name=delete_name,
            csv_tables=csv_tables,
            table_name=name,
            column_names=column_names,
            include_workflow=not no_workflow,
            force=force,
            refresh_credentials=refresh_credentials or config.refresh_db_credentials,
        )
    )


async def _run_scaffold(
    credentials: CredentialRecord,
    store: CredentialStore,
    config: CLIConfig,
    json_output: bool,
    delete_name: str | None,
    csv_tables: list[CSVTable],
    table_name: str | None,
    column_names: list[str],
    include_workflow: bool,
    force: bool,
    refresh_credentials: bool,
) -> None:
    """Resolve DB credentials, then run the selected pipeline(s)."""
    detached = DetachedTasks()

    async with RetoolClient(credentials, timeout=config.timeout) as client:
        log_usage(client, detached, "scaffold", __version__, enabled=config.telemetry)
        try:
            resolved = await resolve_db_credentials(
                credentials, client, store, force_refresh=refresh_credentials
            )

            def new_orchestrator() -> ScaffoldOrchestrator:
                return ScaffoldOrchestrator(
                    tables=RetoolTableService(client, resolved),
                    workflows=RetoolWorkflowService(client, resolved),
                    apps=RetoolAppService(client, resolved),
                    reporter=JsonReporter() if json_output else ConsoleReporter(),
                    confirm=confirm_async,
                    detached=detached,
                )

            if delete_name:
                await new_orchestrator().delete(delete_name, force=force)
            elif csv_tables:
                for table in csv_tables:
                    await new_orchestrator().create(
                        table.name, table.columns, include_workflow, rows=table.rows
                    )
            else:
                await new_orchestrator().create(table_name or "", column_names, include_workflow)
        finally:
            await detached.settle(config.detached_grace)
