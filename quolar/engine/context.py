"""Workflow context threaded through the steps of one run.

This module provides the ``WorkflowContext`` dataclass that accumulates
state across the workflow steps, and the ``WorkflowError`` record appended
whenever a step fails.

Each output field starts unset and is written exactly once, by the step
that produces it. ``assign()`` enforces this so later steps can rely on
earlier outputs once they are reached.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from quolar.exceptions import ContextStateError
from quolar.models.domain import PRResult, TestPlan, TestResults, Ticket

# Fields a step may write; everything else is fixed at construction
_ASSIGNABLE_FIELDS = frozenset({"ticket", "test_plan", "generated_code", "test_results", "pr_result"})


@dataclass
class WorkflowError:
    """A step failure recorded on the context.

    Attributes:
        step: Step name, or ``"workflow"`` for errors outside any step.
        message: Failure text.
        recoverable: Whether the run continued after the failure.
        timestamp: When the failure was recorded (UTC).
    """

    step: str
    message: str
    recoverable: bool
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass
class WorkflowContext:
    """State accumulated by one workflow run.

    Owned by a single ``execute`` call and never shared between runs.

    Attributes:
        ticket_id: Ticket identifier the run was started with.
        ticket: Set by ``analyze_ticket``.
        test_plan: Set by ``generate_test_plan``.
        generated_code: Set by ``generate_code``.
        test_results: Set by ``execute_tests``.
        pr_result: Set by ``create_pr``.
        errors: Append-only failure log.
    """

    ticket_id: str
    ticket: Ticket | None = None
    test_plan: TestPlan | None = None
    generated_code: str | None = None
    test_results: TestResults | None = None
    pr_result: PRResult | None = None
    errors: list[WorkflowError] = field(default_factory=list)

    def assign(self, field_name: str, value: Any) -> None:
        """Set an output field for the first and only time.

        Args:
            field_name: One of ticket, test_plan, generated_code,
                test_results, pr_result.
            value: The value to store.

        Raises:
            ContextStateError: If the field is not assignable or already set.
        """
        if field_name not in _ASSIGNABLE_FIELDS:
            raise ContextStateError(f"Context field is not assignable: {field_name}", field_name)
        if getattr(self, field_name) is not None:
            raise ContextStateError(f"Context field already set: {field_name}", field_name)
        setattr(self, field_name, value)

    def require_ticket(self) -> Ticket:
        """Return the ticket, failing if ``analyze_ticket`` has not run yet."""
        if self.ticket is None:
            raise ContextStateError("Ticket has not been analyzed yet", "ticket")
        return self.ticket

    def record_error(self, step: str, message: str, recoverable: bool) -> WorkflowError:
        """Append a failure to the error log and return it."""
        error = WorkflowError(step=step, message=message, recoverable=recoverable)
        self.errors.append(error)
        return error

    def has_fatal_error(self, message: str | None = None) -> bool:
        """Check whether a non-recoverable error (optionally with ``message``) is recorded."""
        return any(
            not error.recoverable and (message is None or error.message == message) for error in self.errors
        )

    @property
    def acceptance_criteria(self) -> list[str]:
        """Acceptance criteria of the analyzed ticket (empty before step 1)."""
        return list(self.ticket.acceptance_criteria) if self.ticket is not None else []
