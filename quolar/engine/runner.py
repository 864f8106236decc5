"""
Step runner for the workflow engine.

The ``StepRunner`` executes one named step at a time: it times the step
operation, converts collaborator exceptions into ``Fail`` outcomes, classifies
failures as recoverable or fatal, appends the matching ``WorkflowError`` to
the context and keeps an ordered list of ``StepResult`` records.

The runner never raises on a step failure. It returns the outcome and lets
the orchestrator decide whether to continue by inspecting
``Fail.recoverable``.

Example:
    >>> runner = StepRunner()
    >>> outcome = await runner.run(WorkflowStep.ANALYZE_TICKET, context, analyze)
    >>> if isinstance(outcome, Fail) and not outcome.recoverable:
    ...     return  # abort remaining steps
    >>> runner.results[-1].message
    'analyze_ticket completed'
"""

import time
from dataclasses import replace

import structlog

from quolar.engine.context import WorkflowContext
from quolar.engine.types import Fail, Ok, StepOperation, StepOutcome, StepResult, is_recoverable
from quolar.enums import WorkflowStep

log = structlog.get_logger(__name__)


def elapsed_ms(started: float) -> int:
    """Milliseconds elapsed since a ``time.perf_counter()`` reading."""
    return int((time.perf_counter() - started) * 1000)


def describe_error(error: BaseException) -> str:
    """Failure text for an exception, falling back to its type name."""
    return str(error) or type(error).__name__


class StepRunner:
    """Run workflow steps and keep their results.

    A runner belongs to a single workflow run; create a new one per
    ``execute`` call so results never leak between runs.

    Attributes:
        results: Step results in execution order.
    """

    def __init__(self) -> None:
        self.results: list[StepResult] = []

    async def run(
        self,
        step: WorkflowStep,
        context: WorkflowContext,
        operation: StepOperation,
    ) -> StepOutcome:
        """Run one step and record its result.

        Args:
            step: Step identifier; decides recoverability.
            context: Context of the current run. Failures are appended to
                ``context.errors``.
            operation: Zero-argument coroutine function. It may return
                ``Ok``, ``Fail`` or a bare payload (treated as ``Ok``), or
                raise.

        Returns:
            ``Ok`` with the step payload, or ``Fail`` with ``recoverable``
            set from the fixed classification table.
        """
        log.info("step_started", step=str(step), ticket_id=context.ticket_id)
        started = time.perf_counter()

        outcome = await self._invoke(step, operation)
        duration = elapsed_ms(started)

        if isinstance(outcome, Ok):
            self.results.append(
                StepResult(
                    step=step,
                    success=True,
                    message=f"{step} completed",
                    duration=duration,
                    data=outcome.data,
                )
            )
            log.info("step_completed", step=str(step), duration_ms=duration)
            return outcome

        outcome = replace(outcome, recoverable=is_recoverable(step))
        context.record_error(str(step), outcome.message, outcome.recoverable)
        self.results.append(
            StepResult(
                step=step,
                success=False,
                message=outcome.message,
                duration=duration,
            )
        )

        if outcome.recoverable:
            log.warning("step_failed_recoverable", step=str(step), error=outcome.message, duration_ms=duration)
        else:
            log.error("step_failed", step=str(step), error=outcome.message, duration_ms=duration)

        return outcome

    @staticmethod
    async def _invoke(step: WorkflowStep, operation: StepOperation) -> StepOutcome:
        """Await the operation, turning exceptions into ``Fail``."""
        try:
            value = await operation()
        except Exception as e:
            log.debug("step_exception", step=str(step), exc_info=True)
            return Fail(describe_error(e))

        if isinstance(value, (Ok, Fail)):
            return value
        return Ok(value)
