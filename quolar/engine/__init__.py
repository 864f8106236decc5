"""Workflow engine: orchestrator, step runner and result rendering."""

from quolar.engine.context import WorkflowContext, WorkflowError
from quolar.engine.healing import HealingPolicy
from quolar.engine.orchestrator import WorkflowOrchestrator, build_test_plan, plan_name
from quolar.engine.pr_body import generate_pr_body
from quolar.engine.report import format_result, result_to_dict
from quolar.engine.runner import StepRunner
from quolar.engine.types import (
    RECOVERABLE_STEPS,
    Fail,
    Ok,
    StepOutcome,
    StepResult,
    WorkflowOptions,
    WorkflowProviders,
    WorkflowResult,
    is_recoverable,
)

__all__ = [
    "RECOVERABLE_STEPS",
    "Fail",
    "HealingPolicy",
    "Ok",
    "StepOutcome",
    "StepResult",
    "StepRunner",
    "WorkflowContext",
    "WorkflowError",
    "WorkflowOptions",
    "WorkflowOrchestrator",
    "WorkflowProviders",
    "WorkflowResult",
    "build_test_plan",
    "format_result",
    "generate_pr_body",
    "is_recoverable",
    "plan_name",
    "result_to_dict",
]
