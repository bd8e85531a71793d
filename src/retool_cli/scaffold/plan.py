"""Provisioning plans for the scaffold command.

A scaffold ties a Retool DB table, a CRUD workflow and an app together by
name only: the workflow and app names are derived from the table name and
nothing on the Retool side links the three.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..errors import ValidationError

PRIMARY_KEY_COLUMN = "id"
MAX_IDENTIFIER_LENGTH = 63  # Postgres identifier limit

IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
WHITESPACE_RE = re.compile(r"\s+")


class StepKind(Enum):
    """Kinds of pipeline steps."""

    CREATE_TABLE = "create_table"
    INSERT_SAMPLE_DATA = "insert_sample_data"
    CREATE_WORKFLOW = "create_workflow"
    CREATE_APP = "create_app"
    DELETE_TABLE = "delete_table"
    DELETE_WORKFLOW = "delete_workflow"
    DELETE_APP = "delete_app"


# Steps launched without being awaited by the pipeline
DETACHED_STEPS = frozenset({StepKind.INSERT_SAMPLE_DATA})


@dataclass(frozen=True)
class PlanStep:
    """One remote operation in a provisioning plan."""

    kind: StepKind
    target: str
    table_name: str

    @property
    def detached(self) -> bool:
        """Whether the pipeline launches this step without awaiting it."""
        return self.kind in DETACHED_STEPS

    @property
    def label(self) -> str:
        """Human-readable description, e.g. "Create table orders"."""
        verb, noun = self.kind.value.split("_", 1)
        return f"{verb.capitalize()} {noun.replace('_', ' ')} {self.target}"


@dataclass(frozen=True)
class ProvisioningPlan:
    """Ordered steps for one scaffold invocation. Never persisted."""

    table_name: str
    steps: tuple[PlanStep, ...]
    columns: tuple[str, ...] = ()
    rows: tuple[dict[str, Any], ...] | None = None
    requires_confirmation: bool = False
    skipped: tuple[StepKind, ...] = field(default=())

    def kinds(self) -> list[StepKind]:
        """Step kinds in execution order."""
        return [step.kind for step in self.steps]


def workflow_name_for(table_name: str) -> str:
    """Name of the CRUD workflow scaffolded for ``table_name``."""
    return f"{table_name} CRUD Workflow"


def app_name_for(table_name: str) -> str:
    """Name of the app scaffolded for ``table_name``."""
    return f"{table_name} App"


def normalize_identifier(name: str, what: str = "Table name") -> str:
    """Normalize a table or column name.

    Surrounding whitespace is trimmed and inner whitespace becomes "_".

    Raises:
        ValidationError: If the result is blank, too long or not an identifier
    """
    normalized = WHITESPACE_RE.sub("_", (name or "").strip())
    if not normalized:
        raise ValidationError(f"{what} cannot be blank.")
    if len(normalized) > MAX_IDENTIFIER_LENGTH:
        raise ValidationError(
            f"{what} '{normalized}' is longer than {MAX_IDENTIFIER_LENGTH} characters."
        )
    if not IDENTIFIER_RE.match(normalized):
        raise ValidationError(
            f"{what} '{normalized}' is invalid. Use letters, digits and underscores, "
            "starting with a letter or underscore."
        )
    return normalized


def normalize_columns(columns: list[str] | tuple[str, ...]) -> tuple[str, ...]:
    """Normalize column names.

    An "id" column may be listed; it becomes the primary key rather than a
    second column.

    Returns:
        Column names in the order given

    Raises:
        ValidationError: If there are no columns, or a name is malformed or repeated
    """
    if not columns:
        raise ValidationError("At least one column name is required.")

    seen: set[str] = set()
    result: list[str] = []
    for column in columns:
        name = normalize_identifier(column, "Column name")
        if name.lower() in seen:
            raise ValidationError(f"Column name '{name}' is repeated.")
        seen.add(name.lower())
        result.append(name)
    return tuple(result)


def split_column_args(values: tuple[str, ...] | list[str]) -> list[str]:
    """Split repeated --columns values on commas and whitespace."""
    columns: list[str] = []
    for value in values:
        columns.extend(part for part in re.split(r"[,\s]+", value) if part)
    return columns


def build_create_plan(
    table_name: str,
    columns: list[str] | tuple[str, ...],
    include_workflow: bool = True,
    rows: list[dict[str, Any]] | None = None,
) -> ProvisioningPlan:
    """Build the create pipeline for a scaffold.

    Args:
        table_name: Table to create; also the base of the workflow/app names
        columns: Column names (an "id" column is always the primary key)
        include_workflow: Whether to create the CRUD workflow
        rows: Initial rows; when given, no sample data is generated

    Raises:
        ValidationError: If the table or a column name is malformed
    """
    name = normalize_identifier(table_name)
    cols = normalize_columns(columns)

    steps = [PlanStep(StepKind.CREATE_TABLE, name, name)]
    skipped: list[StepKind] = []

    if rows is None:
        steps.append(PlanStep(StepKind.INSERT_SAMPLE_DATA, name, name))
    else:
        skipped.append(StepKind.INSERT_SAMPLE_DATA)

    if include_workflow:
        steps.append(PlanStep(StepKind.CREATE_WORKFLOW, workflow_name_for(name), name))
    else:
        skipped.append(StepKind.CREATE_WORKFLOW)

    steps.append(PlanStep(StepKind.CREATE_APP, app_name_for(name), name))

    return ProvisioningPlan(
        table_name=name,
        steps=tuple(steps),
        columns=cols,
        rows=tuple(rows) if rows is not None else None,
        skipped=tuple(skipped),
    )


def build_delete_plan(table_name: str, force: bool = False) -> ProvisioningPlan:
    """Build the delete pipeline for a scaffold.

    Whitespace is normalized as on create, so ``-d "my table"`` targets the
    ``my_table`` scaffold. The identifier rules are not applied, so resources
    created with odd names can still be cleaned up.

    Raises:
        ValidationError: If the name is blank
    """
    name = WHITESPACE_RE.sub("_", (table_name or "").strip())
    if not name:
        raise ValidationError("Table name cannot be blank.")

    return ProvisioningPlan(
        table_name=name,
        steps=(
            PlanStep(StepKind.DELETE_TABLE, name, name),
            PlanStep(StepKind.DELETE_WORKFLOW, workflow_name_for(name), name),
            PlanStep(StepKind.DELETE_APP, app_name_for(name), name),
        ),
        requires_confirmation=not force,
    )
