"""Scaffold: a Retool DB table, its CRUD workflow and its app, under one name."""

from .orchestrator import (
    NullReporter,
    PipelineResult,
    PipelineState,
    ProgressReporter,
    ScaffoldOrchestrator,
    confirmation_message,
)
from .plan import (
    PlanStep,
    ProvisioningPlan,
    StepKind,
    app_name_for,
    build_create_plan,
    build_delete_plan,
    normalize_identifier,
    split_column_args,
    workflow_name_for,
)
from .services import (
    AppService,
    RetoolAppService,
    RetoolTableService,
    RetoolWorkflowService,
    TableDescriptor,
    TableService,
    WorkflowService,
    match_single,
)

__all__ = [
    # Orchestrator
    "ScaffoldOrchestrator",
    "PipelineState",
    "PipelineResult",
    "ProgressReporter",
    "NullReporter",
    "confirmation_message",
    # Plan
    "PlanStep",
    "ProvisioningPlan",
    "StepKind",
    "app_name_for",
    "workflow_name_for",
    "build_create_plan",
    "build_delete_plan",
    "normalize_identifier",
    "split_column_args",
    # Services
    "TableService",
    "WorkflowService",
    "AppService",
    "TableDescriptor",
    "RetoolTableService",
    "RetoolWorkflowService",
    "RetoolAppService",
    "match_single",
]
