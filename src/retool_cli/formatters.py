"""CLI output formatting helpers.

Pipeline progress goes to stdout through click; errors go to stderr through
rich.
"""

import json
from typing import Any

import click
from rich.console import Console
from rich.markup import escape

from .apps import AppListing, parse_updated_at
from .config import CLIConfig
from .credentials.models import CredentialRecord
from .scaffold.orchestrator import PipelineResult
from .scaffold.plan import PlanStep, StepKind
from .scaffold.services import TableDescriptor

error_console = Console(stderr=True, highlight=False)

SUCCESS_LINES = {
    StepKind.CREATE_TABLE: "Successfully created a table named {target}. 🎉",
    StepKind.CREATE_WORKFLOW: "Successfully created a workflow named {target}. 🎉",
    StepKind.CREATE_APP: "Successfully created an App named {target}. 🎉",
    StepKind.DELETE_TABLE: "Deleted {target} table. 🗑️",
    StepKind.DELETE_WORKFLOW: "Deleted {target}. 🗑️",
    StepKind.DELETE_APP: "Deleted {target}. 🗑️",
}


def print_error(message: str) -> None:
    """Print an error to stderr."""
    error_console.print(f"[red]Error:[/red] {escape(message)}", soft_wrap=True)


def print_warning(message: str) -> None:
    """Print a warning to stderr."""
    error_console.print(f"[yellow]Warning:[/yellow] {escape(message)}", soft_wrap=True)


def _step_output_dict(output: Any) -> Any:
    if isinstance(output, TableDescriptor):
        return {
            "name": output.name,
            "fields": list(output.fields),
            "primary_key": output.primary_key,
        }
    return output


def result_to_dict(result: PipelineResult) -> dict[str, Any]:
    """Convert a pipeline result to a JSON-friendly dict."""
    return {
        "table": result.table_name,
        "completed": [{"step": s.kind.value, "target": s.target} for s in result.completed],
        "detached": [{"step": s.kind.value, "target": s.target} for s in result.detached],
        "skipped": [kind.value for kind in result.skipped],
        "outputs": {kind.value: _step_output_dict(out) for kind, out in result.outputs.items()},
    }


class ConsoleReporter:
    """Human-readable progress, one line per step."""

    def step_started(self, step: PlanStep) -> None:
        click.echo(f"{step.label}...")

    def step_detached(self, step: PlanStep) -> None:
        click.echo(f"{step.label} (running in the background)")

    def step_succeeded(self, step: PlanStep, output: Any) -> None:
        template = SUCCESS_LINES.get(step.kind)
        if template:
            click.echo(f"  {template.format(target=step.target)}")
        if isinstance(output, dict) and output.get("url"):
            click.echo(f"  {click.style('View in browser:', bold=True)} {output['url']}")

    def step_failed(self, step: PlanStep, error: Exception, completed: list[PlanStep]) -> None:
        click.echo(f"  {step.label} failed.")
        if completed:
            click.echo("Already completed (not rolled back):")
            for done in completed:
                click.echo(f"  - {done.label}")

    def summary(self, result: PipelineResult) -> None:
        click.echo()
        kinds = {step.kind for step in result.completed}
        if StepKind.CREATE_TABLE in kinds:
            parts = ["table"]
            if StepKind.CREATE_WORKFLOW in kinds:
                parts.append("CRUD workflow")
            parts.append("app")
            click.echo(f"Scaffolded {result.table_name}: {', '.join(parts)}. ✅")
        else:
            click.echo(f"Deleted {result.table_name} table, CRUD workflow and app. ✅")


class JsonReporter:
    """Silent while running; prints the result as JSON at the end."""

    def step_started(self, step: PlanStep) -> None:
        pass

    def step_detached(self, step: PlanStep) -> None:
        pass

    def step_succeeded(self, step: PlanStep, output: Any) -> None:
        pass

    def step_failed(self, step: PlanStep, error: Exception, completed: list[PlanStep]) -> None:
        click.echo(
            json.dumps(
                {
                    "error": str(error),
                    "failed_step": step.kind.value,
                    "completed": [{"step": s.kind.value, "target": s.target} for s in completed],
                },
                indent=2,
            )
        )

    def summary(self, result: PipelineResult) -> None:
        click.echo(json.dumps(result_to_dict(result), indent=2))


def print_credentials(record: CredentialRecord, json_output: bool = False) -> None:
    """Print who is logged in.

    Tokens are never printed.
    """
    if json_output:
        data = record.to_dict()
        data.pop("sessionToken", None)
        data.pop("accessToken", None)
        click.echo(json.dumps(data, indent=2))
        return

    name = " ".join(p for p in (record.first_name, record.last_name) if p)
    if name and record.email:
        click.echo(f"Logged in as {name} ({record.email})")
    elif name or record.email:
        click.echo(f"Logged in as {name or record.email}")
    click.echo(f"Domain: {record.origin}")
    if record.has_db_credentials:
        click.echo(f"Retool DB: {record.retool_db_uuid} (grid {record.grid_id})")
        if record.has_connection_string is not None:
            click.echo(f"Connection string: {'available' if record.has_connection_string else 'not set'}")
    else:
        click.echo("Retool DB: not resolved")


def print_config(config: CLIConfig, json_output: bool = False) -> None:
    """Print config values and where each came from."""
    if json_output:
        click.echo(json.dumps(config.as_dict(), indent=2))
        return

    for key, value in config.as_dict().items():
        shown = "none" if value is None else value
        click.echo(f"{key}: {shown}  ({config.get_source(key)})")


def _listing_date(item: dict[str, Any]) -> str:
    return parse_updated_at(item).astimezone().strftime("%b %d, %Y, %I:%M %p")


def print_apps(listing: AppListing, json_output: bool = False) -> None:
    """Print folders then apps, one per line with their last update."""
    if json_output:
        click.echo(json.dumps({"folders": listing.folders, "apps": listing.apps}, indent=2))
        return

    for folder in listing.folders:
        click.echo(f"{_listing_date(folder)}     📂     {folder.get('name')}/")
    for app in listing.apps:
        icon = "🔧" if app.get("isGlobalWidget") else "💻"
        click.echo(f"{_listing_date(app)}     {icon}     {app.get('name')}")


def print_app_created(result: dict[str, Any], json_output: bool = False) -> None:
    """Print the outcome of creating an app."""
    if json_output:
        click.echo(json.dumps(result, indent=2))
        return
    click.echo("Successfully created an App. 🎉")
    click.echo(f"{click.style('View in browser:', bold=True)} {result['url']}")
