"""Type definitions for the workflow engine.

This module holds the values that flow between the orchestrator, the step
runner and callers:

- ``Ok`` / ``Fail``: tagged outcome of a single step operation
- ``StepResult``: the record kept for every step that was entered
- ``WorkflowOptions``: per-run flags
- ``WorkflowProviders``: the capability handles for a run
- ``WorkflowResult``: what ``WorkflowOrchestrator.execute`` returns

Example:
    A step operation returns an outcome instead of raising::

        async def operation() -> StepOutcome:
            if context.test_plan is None:
                return Fail("Test plan not generated")
            code = await test_framework.generate_test(context.test_plan)
            return Ok({"code_length": len(code)})
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Union

from quolar.enums import WorkflowStep

if TYPE_CHECKING:
    from quolar.engine.context import WorkflowContext
    from quolar.providers.base import (
        AnalyticsProvider,
        DocsProvider,
        TestFrameworkProvider,
        TicketProvider,
        VCSProvider,
    )


# Steps whose failure is recorded but does not abort the run. Every other
# step is fatal. Classification is by step identity only.
RECOVERABLE_STEPS: frozenset[WorkflowStep] = frozenset(
    {
        WorkflowStep.SEARCH_PATTERNS,
        WorkflowStep.HEAL_FAILURES,
        WorkflowStep.REPORT_RESULTS,
    }
)

# Step name used for errors that escape the step sequence itself
WORKFLOW_SCOPE = "workflow"


def is_recoverable(step: WorkflowStep | str) -> bool:
    """Return True if a failure in ``step`` lets the workflow continue."""
    try:
        return WorkflowStep(step) in RECOVERABLE_STEPS
    except ValueError:
        return False


@dataclass(frozen=True)
class Ok:
    """Successful step outcome carrying an opaque payload."""

    data: Any = None

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Fail:
    """Failed step outcome.

    Attributes:
        message: Failure text recorded on the step result and the error list.
        recoverable: Filled in by the step runner from ``RECOVERABLE_STEPS``;
            any value set by a step operation is overridden.
    """

    message: str
    recoverable: bool = False

    @property
    def ok(self) -> bool:
        return False


StepOutcome = Union[Ok, Fail]

# A step operation: zero-argument coroutine function. Returning a value that
# is neither Ok nor Fail is shorthand for Ok(value).
StepOperation = Callable[[], Awaitable[Any]]


@dataclass
class StepResult:
    """Record of one executed step, in execution order.

    Attributes:
        step: Step identifier.
        success: Whether the step completed.
        message: ``"<step> completed"`` on success, the failure text otherwise.
        duration: Wall time in milliseconds.
        data: Step-specific payload (successful steps only).
    """

    step: WorkflowStep
    success: bool
    message: str
    duration: int
    data: Any = None


@dataclass
class WorkflowOptions:
    """Per-run workflow flags.

    Attributes:
        ticket_id: Ticket to process.
        dry_run: Stop after code generation; no execution, healing, PR or
            reporting.
        skip_pr: Run and heal tests but do not open a pull request.
        max_retries: Threaded through from configuration. The engine does
            not retry steps; the value is kept for callers and adapters.
    """

    ticket_id: str
    dry_run: bool = False
    skip_pr: bool = False
    max_retries: int | None = None


@dataclass
class WorkflowProviders:
    """Capability handles used by one orchestrator.

    ``docs`` and ``analytics`` are optional; when ``None`` their steps are
    skipped without producing a step result.
    """

    ticket: TicketProvider
    vcs: VCSProvider
    test_framework: TestFrameworkProvider
    docs: DocsProvider | None = None
    analytics: AnalyticsProvider | None = None


@dataclass
class WorkflowResult:
    """Final result of a workflow run.

    Attributes:
        success: True iff no error was recorded on the context.
        context: The final workflow context.
        steps: Step results in execution order, also on failure.
        total_duration: Milliseconds from orchestrator entry to exit.
    """

    success: bool
    context: WorkflowContext
    steps: list[StepResult] = field(default_factory=list)
    total_duration: int = 0
