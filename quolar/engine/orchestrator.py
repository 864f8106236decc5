"""
Workflow orchestrator for ticket-to-tests automation.

This module provides the WorkflowOrchestrator class, which drives one ticket
through the fixed automation pipeline:

    analyze_ticket -> search_patterns -> generate_test_plan -> generate_code
    -> execute_tests -> heal_failures -> create_pr -> report_results

Each step is run through a ``StepRunner`` that times it, turns collaborator
errors into ``Fail`` outcomes and records a ``StepResult``. Failures in
``search_patterns``, ``heal_failures`` and ``report_results`` are recorded
and the run continues; any other failure ends the run.

Skip rules:
    - ``search_patterns`` needs a documentation provider
    - ``execute_tests``, ``heal_failures``, ``create_pr`` and
      ``report_results`` are skipped on a dry run
    - ``heal_failures`` needs at least one failed test
    - ``create_pr`` is skipped with ``skip_pr``
    - ``report_results`` needs an analytics provider and test results

A skipped step leaves no StepResult.

Example:
    >>> providers = load_providers(settings)
    >>> orchestrator = WorkflowOrchestrator(providers, settings)
    >>> result = await orchestrator.execute(WorkflowOptions(ticket_id="ENG-123"))
    >>> result.success
    True
"""

import dataclasses
import re
import time
from collections.abc import Iterator

import structlog

from quolar.config.settings import QuolarSettings, WorkflowConfig
from quolar.engine.context import WorkflowContext
from quolar.engine.healing import HealingPolicy
from quolar.engine.pr_body import generate_pr_body
from quolar.engine.runner import StepRunner, describe_error, elapsed_ms
from quolar.engine.types import (
    WORKFLOW_SCOPE,
    Fail,
    Ok,
    StepOperation,
    StepOutcome,
    WorkflowOptions,
    WorkflowProviders,
    WorkflowResult,
)
from quolar.enums import WorkflowStep
from quolar.models.domain import ExecutionConfig, PROptions, TestPlan, TestStep, Ticket

log = structlog.get_logger(__name__)

_PLAN_NAME_INVALID = re.compile(r"[^a-z0-9]")


def plan_name(ticket_id: str) -> str:
    """Test plan name for a ticket: ``ENG-123`` -> ``test-eng-123``."""
    return "test-" + _PLAN_NAME_INVALID.sub("-", ticket_id.lower())


def branch_name(ticket_id: str) -> str:
    """Branch the generated tests are pushed to."""
    return f"test/{ticket_id.lower()}"


def commit_message(ticket_id: str) -> str:
    return f"test({ticket_id}): add automated tests"


def build_test_plan(ticket: Ticket) -> TestPlan:
    """Build a plan with one verification step per acceptance criterion.

    Args:
        ticket: Analyzed ticket with acceptance criteria attached.

    Returns:
        TestPlan named after the ticket, tagged with its labels.
    """
    return TestPlan(
        name=plan_name(ticket.id),
        description=ticket.title,
        steps=[TestStep(action="verify", assertion=criterion) for criterion in ticket.acceptance_criteria],
        fixtures=[],
        tags=list(ticket.labels),
    )


class WorkflowOrchestrator:
    """Run the ticket-to-tests workflow against a set of providers.

    The orchestrator holds only its providers and configuration. Every
    ``execute`` call creates its own context and step runner, so concurrent
    runs on one orchestrator do not share state.

    Attributes:
        providers: Capability handles. ``docs`` and ``analytics`` may be None.
        workflow: Workflow behavior settings (healing threshold, healing
            concurrency).
        healing: Policy deciding which heal attempts are accepted.
    """

    def __init__(self, providers: WorkflowProviders, settings: QuolarSettings | None = None) -> None:
        self.providers = providers
        self.workflow = settings.workflow if settings is not None else WorkflowConfig()
        self.healing = HealingPolicy(self.workflow.auto_healing_threshold)

    async def execute(self, options: WorkflowOptions) -> WorkflowResult:
        """Execute the full workflow for one ticket.

        Never raises for collaborator failures: every failure is recorded on
        ``result.context.errors`` and reflected in ``result.success``.

        Args:
            options: Ticket id and run flags.

        Returns:
            WorkflowResult with the final context and the step results in
            execution order.
        """
        started = time.perf_counter()
        context = WorkflowContext(ticket_id=options.ticket_id)
        runner = StepRunner()

        with structlog.contextvars.bound_contextvars(ticket_id=options.ticket_id):
            log.info(
                "workflow_started",
                dry_run=options.dry_run,
                skip_pr=options.skip_pr,
                docs_enabled=self.providers.docs is not None,
                analytics_enabled=self.providers.analytics is not None,
            )

            try:
                await self._run_steps(context, runner, options)
            except Exception as e:
                message = describe_error(e)
                log.error("workflow_failed", error=message, exc_info=True)
                if not context.has_fatal_error(message):
                    context.record_error(WORKFLOW_SCOPE, message, recoverable=False)

            result = WorkflowResult(
                success=not context.errors,
                context=context,
                steps=list(runner.results),
                total_duration=elapsed_ms(started),
            )
            log.info(
                "workflow_finished",
                success=result.success,
                steps=len(result.steps),
                errors=len(context.errors),
                duration_ms=result.total_duration,
            )

        return result

    async def _run_steps(self, context: WorkflowContext, runner: StepRunner, options: WorkflowOptions) -> None:
        """Run the step sequence, stopping at the first fatal failure."""
        for step, operation in self._plan_steps(context, options):
            outcome = await runner.run(step, context, operation)
            if isinstance(outcome, Fail) and not outcome.recoverable:
                log.warning("workflow_aborted", step=str(step))
                return

    def _plan_steps(
        self, context: WorkflowContext, options: WorkflowOptions
    ) -> Iterator[tuple[WorkflowStep, StepOperation]]:
        """Yield ``(step, operation)`` pairs for the steps to enter.

        Conditions are evaluated lazily, right before each step, so they
        see the outputs of the steps before it.
        """
        yield WorkflowStep.ANALYZE_TICKET, lambda: self._analyze_ticket(context)

        if self.providers.docs is not None:
            yield WorkflowStep.SEARCH_PATTERNS, lambda: self._search_patterns(context)

        yield WorkflowStep.GENERATE_TEST_PLAN, lambda: self._generate_test_plan(context)
        yield WorkflowStep.GENERATE_CODE, lambda: self._generate_code(context)

        if options.dry_run:
            log.info("dry_run_stop")
            return

        yield WorkflowStep.EXECUTE_TESTS, lambda: self._execute_tests(context)

        if context.test_results is not None and context.test_results.failed > 0:
            yield WorkflowStep.HEAL_FAILURES, lambda: self._heal_failures(context)

        if not options.skip_pr:
            yield WorkflowStep.CREATE_PR, lambda: self._create_pr(context)

        if self.providers.analytics is not None and context.test_results is not None:
            yield WorkflowStep.REPORT_RESULTS, lambda: self._report_results(context)

    async def _analyze_ticket(self, context: WorkflowContext) -> StepOutcome:
        tickets = self.providers.ticket
        ticket = await tickets.read(context.ticket_id)
        criteria = await tickets.get_acceptance_criteria(context.ticket_id)
        ticket = dataclasses.replace(ticket, acceptance_criteria=list(criteria))
        context.assign("ticket", ticket)

        log.info("ticket_analyzed", title=ticket.title, criteria=len(criteria))
        return Ok({"ticket": ticket})

    async def _search_patterns(self, context: WorkflowContext) -> StepOutcome:
        ticket = context.require_ticket()
        patterns = await self.providers.docs.search_patterns(ticket.title)
        log.info("patterns_found", count=len(patterns))
        return Ok({"patterns_found": len(patterns)})

    async def _generate_test_plan(self, context: WorkflowContext) -> StepOutcome:
        plan = build_test_plan(context.require_ticket())
        context.assign("test_plan", plan)
        log.info("test_plan_generated", plan=plan.name, steps=len(plan.steps))
        return Ok({"plan": plan})

    async def _generate_code(self, context: WorkflowContext) -> StepOutcome:
        if context.test_plan is None:
            return Fail("Test plan not generated")

        code = await self.providers.test_framework.generate_test(context.test_plan)
        context.assign("generated_code", code)
        log.info("test_code_generated", code_length=len(code))
        return Ok({"code_length": len(code)})

    async def _execute_tests(self, context: WorkflowContext) -> StepOutcome:
        results = await self.providers.test_framework.execute(ExecutionConfig())
        context.assign("test_results", results)
        log.info("tests_executed", passed=results.passed, failed=results.failed, skipped=results.skipped)
        return Ok({"passed": results.passed, "failed": results.failed})

    async def _heal_failures(self, context: WorkflowContext) -> StepOutcome:
        healed = await self.healing.heal_all(
            context.test_results.failures,
            self.providers.test_framework.heal,
            max_concurrency=self.workflow.parallel_agents,
        )
        log.info("healing_finished", attempted=len(context.test_results.failures), healed=len(healed))
        return Ok({"healed_tests": healed})

    async def _create_pr(self, context: WorkflowContext) -> StepOutcome:
        ticket = context.require_ticket()
        vcs = self.providers.vcs
        branch = branch_name(context.ticket_id)

        await vcs.create_branch(branch)
        await vcs.commit(commit_message(context.ticket_id), [])
        await vcs.push(branch)

        pr = await vcs.create_pr(
            PROptions(
                title=f"test({context.ticket_id}): {ticket.title}",
                body=generate_pr_body(context),
                branch=branch,
            )
        )
        context.assign("pr_result", pr)
        log.info("pr_created", pr_number=pr.number, pr_url=pr.url, branch=branch)

        await self.providers.ticket.link_pr(context.ticket_id, pr.url)
        return Ok({"pr_url": pr.url})

    async def _report_results(self, context: WorkflowContext) -> StepOutcome:
        await self.providers.analytics.report_results(context.test_results)
        log.info("results_reported", analytics=self.providers.analytics.name)
        return Ok({"reported": True})
