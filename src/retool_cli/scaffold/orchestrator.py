"""Scaffold pipelines: create or delete a table, its CRUD workflow and its app.

Both pipelines run their steps strictly in sequence and stop at the first
failure. Steps that already succeeded are not rolled back, so a failed
pipeline can leave some of the three resources behind.

State machine:
    IDLE -> CONFIRMING (delete only) -> RUNNING -> DONE
    CONFIRMING -> ABORTED (declined), RUNNING -> ABORTED (step failed)
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from ..errors import UserCancelledError
from ..shared.logging import get_logger
from ..shared.tasks import DetachedTasks
from .plan import (
    PRIMARY_KEY_COLUMN,
    PlanStep,
    ProvisioningPlan,
    StepKind,
    build_create_plan,
    build_delete_plan,
)
from .services import AppService, TableDescriptor, TableService, WorkflowService

logger = get_logger(__name__)

ConfirmCallback = Callable[[str], Awaitable[bool]]


class PipelineState(Enum):
    """Lifecycle of one pipeline run."""

    IDLE = "idle"
    CONFIRMING = "confirming"
    RUNNING = "running"
    DONE = "done"
    ABORTED = "aborted"


@dataclass
class PipelineResult:
    """Outcome of a completed pipeline."""

    table_name: str
    completed: list[PlanStep] = field(default_factory=list)
    detached: list[PlanStep] = field(default_factory=list)
    skipped: list[StepKind] = field(default_factory=list)
    outputs: dict[StepKind, Any] = field(default_factory=dict)


class ProgressReporter(Protocol):
    """Receives progress as the pipeline runs."""

    def step_started(self, step: PlanStep) -> None: ...

    def step_detached(self, step: PlanStep) -> None: ...

    def step_succeeded(self, step: PlanStep, output: Any) -> None: ...

    def step_failed(self, step: PlanStep, error: Exception, completed: list[PlanStep]) -> None: ...

    def summary(self, result: PipelineResult) -> None: ...


class NullReporter:
    """Reporter that ignores everything."""

    def step_started(self, step: PlanStep) -> None:
        pass

    def step_detached(self, step: PlanStep) -> None:
        pass

    def step_succeeded(self, step: PlanStep, output: Any) -> None:
        pass

    def step_failed(self, step: PlanStep, error: Exception, completed: list[PlanStep]) -> None:
        pass

    def summary(self, result: PipelineResult) -> None:
        pass


async def _decline(message: str) -> bool:
    return False


def confirmation_message(table_name: str) -> str:
    """Prompt shown before deleting a scaffold."""
    return f"Are you sure you want to delete {table_name} table, CRUD workflow and app?"


class ScaffoldOrchestrator:
    """Runs one create or delete pipeline against the remote services."""

    def __init__(
        self,
        tables: TableService,
        workflows: WorkflowService,
        apps: AppService,
        reporter: ProgressReporter | None = None,
        confirm: ConfirmCallback | None = None,
        detached: DetachedTasks | None = None,
    ):
        """Initialize orchestrator.

        Args:
            tables: Table service
            workflows: Workflow service
            apps: App service
            reporter: Progress reporter (default: silent)
            confirm: Async yes/no prompt for deletions (default: always declines)
            detached: Task set for fire-and-forget steps (default: a private one)
        """
        self.tables = tables
        self.workflows = workflows
        self.apps = apps
        self.reporter: ProgressReporter = reporter or NullReporter()
        self.confirm = confirm or _decline
        self.detached = detached or DetachedTasks()

        self._state = PipelineState.IDLE

    @property
    def state(self) -> PipelineState:
        """Current pipeline state."""
        return self._state

    def _transition(self, new_state: PipelineState) -> None:
        logger.debug("pipeline_state", old=self._state.value, new=new_state.value)
        self._state = new_state

    async def create(
        self,
        table_name: str,
        columns: list[str] | tuple[str, ...],
        include_workflow: bool = True,
        rows: list[dict[str, Any]] | None = None,
    ) -> PipelineResult:
        """Create a table, populate it, then create its workflow and app.

        Args:
            table_name: Table name (base of the workflow and app names)
            columns: Column names
            include_workflow: Create the CRUD workflow
            rows: Initial rows (skips sample data generation)

        Raises:
            ValidationError: If the table or a column name is malformed
            ConflictError: If the table exists
            RemoteError: If a step fails
        """
        plan = build_create_plan(table_name, columns, include_workflow, rows)
        return await self.execute(plan)

    async def delete(self, table_name: str, force: bool = False) -> PipelineResult:
        """Delete a table, its workflow and its app, confirming first unless forced.

        Raises:
            UserCancelledError: If the user declines
            NotFoundError: If a resource is missing or ambiguous
            RemoteError: If a step fails
        """
        plan = build_delete_plan(table_name, force)
        return await self.execute(plan)

    async def execute(self, plan: ProvisioningPlan) -> PipelineResult:
        """Run ``plan`` step by step."""
        if self._state is not PipelineState.IDLE:
            raise RuntimeError(f"Pipeline already {self._state.value}")

        if plan.requires_confirmation:
            self._transition(PipelineState.CONFIRMING)
            if not await self.confirm(confirmation_message(plan.table_name)):
                self._transition(PipelineState.ABORTED)
                raise UserCancelledError()

        self._transition(PipelineState.RUNNING)
        result = PipelineResult(table_name=plan.table_name, skipped=list(plan.skipped))

        for step in plan.steps:
            log = logger.bind(step=step.kind.value, target=step.target)

            if step.detached:
                log.info("pipeline_step_detached")
                self.detached.spawn(self._run_step(step, plan, result), name=step.kind.value)
                result.detached.append(step)
                self.reporter.step_detached(step)
                continue

            log.info("pipeline_step_started")
            self.reporter.step_started(step)
            try:
                output = await self._run_step(step, plan, result)
            except Exception as e:
                log.info("pipeline_step_failed", error=str(e))
                self._transition(PipelineState.ABORTED)
                self.reporter.step_failed(step, e, list(result.completed))
                raise

            result.completed.append(step)
            result.outputs[step.kind] = output
            self.reporter.step_succeeded(step, output)

        self._transition(PipelineState.DONE)
        self.reporter.summary(result)
        return result

    async def _run_step(self, step: PlanStep, plan: ProvisioningPlan, result: PipelineResult) -> Any:
        name = plan.table_name

        if step.kind is StepKind.CREATE_TABLE:
            return await self.tables.create_table(name, plan.columns, plan.rows)

        if step.kind is StepKind.INSERT_SAMPLE_DATA:
            return await self.tables.insert_sample_data(name)

        if step.kind is StepKind.CREATE_WORKFLOW:
            return await self.workflows.create_crud_workflow(step.target, name)

        if step.kind is StepKind.CREATE_APP:
            descriptor = result.outputs.get(StepKind.CREATE_TABLE)
            if not isinstance(descriptor, TableDescriptor):
                descriptor = TableDescriptor(name=name, fields=(PRIMARY_KEY_COLUMN, *plan.columns))
            return await self.apps.create_app_for_table(step.target, name, descriptor.search_column)

        if step.kind is StepKind.DELETE_TABLE:
            return await self.tables.delete_table(step.target)

        if step.kind is StepKind.DELETE_WORKFLOW:
            return await self.workflows.delete_workflow(step.target)

        if step.kind is StepKind.DELETE_APP:
            return await self.apps.delete_app(step.target)

        raise ValueError(f"Unknown step kind: {step.kind}")
