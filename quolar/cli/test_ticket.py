"""The ``test-ticket`` command: run the full workflow for one ticket."""

import asyncio
import json
import sys
from collections.abc import Callable
from dataclasses import dataclass

import click
import structlog

from quolar.config.settings import QuolarSettings
from quolar.engine.orchestrator import WorkflowOrchestrator
from quolar.engine.report import format_result, result_to_dict
from quolar.engine.types import WorkflowOptions, WorkflowProviders, WorkflowResult
from quolar.exceptions import QuolarError
from quolar.providers.registry import load_providers

log = structlog.get_logger(__name__)


@dataclass
class TestTicketArgs:
    """Arguments of a ``test-ticket`` invocation."""

    __test__ = False

    ticket_id: str
    dry_run: bool = False
    skip_pr: bool = False
    verbose: bool = False


async def execute_test_ticket(
    args: TestTicketArgs,
    providers: WorkflowProviders,
    settings: QuolarSettings,
    echo: Callable[[str], None] = click.echo,
) -> WorkflowResult:
    """Run the workflow for a ticket.

    Args:
        args: Command arguments.
        providers: Loaded capability providers.
        settings: Loaded settings; ``workflow.max_retries`` is passed through.
        echo: Sink for verbose progress lines.

    Returns:
        The workflow result.
    """
    if args.verbose:
        echo(f"Starting workflow for ticket: {args.ticket_id}")
        echo(f"Dry run: {'yes' if args.dry_run else 'no'}")
        echo(f"Skip PR: {'yes' if args.skip_pr else 'no'}")

    orchestrator = WorkflowOrchestrator(providers, settings)
    result = await orchestrator.execute(
        WorkflowOptions(
            ticket_id=args.ticket_id,
            dry_run=args.dry_run,
            skip_pr=args.skip_pr,
            max_retries=settings.workflow.max_retries,
        )
    )

    if args.verbose:
        echo(f"\nWorkflow completed in {result.total_duration}ms")
        echo(f"Success: {result.success}")
        echo(f"Steps completed: {len(result.steps)}")
        for step in result.steps:
            status = "✓" if step.success else "✗"
            echo(f"  {status} {step.step} ({step.duration}ms)")
            if not step.success:
                echo(f"    Error: {step.message}")

    return result


@click.command("test-ticket")
@click.argument("ticket_id")
@click.option("--dry-run", is_flag=True, help="Generate the plan and code only; do not run tests or open a PR")
@click.option("--skip-pr", is_flag=True, help="Run and heal tests but do not open a pull request")
@click.option("--verbose", "-v", is_flag=True, help="Print progress for each step")
@click.option(
    "--output",
    type=click.Choice(["markdown", "json"]),
    default="markdown",
    show_default=True,
    help="Report format",
)
@click.pass_context
def test_ticket_command(
    ctx: click.Context,
    ticket_id: str,
    dry_run: bool,
    skip_pr: bool,
    verbose: bool,
    output: str,
) -> None:
    """Generate, run and heal tests for TICKET_ID, then open a PR.

    \b
    Exit codes:
      0 - Workflow succeeded
      1 - Workflow failed, or configuration/provider error
    """
    args = TestTicketArgs(ticket_id=ticket_id, dry_run=dry_run, skip_pr=skip_pr, verbose=verbose)

    try:
        settings = QuolarSettings.load(ctx.ensure_object(dict).get("config_path"))
        providers = load_providers(settings)
        result = asyncio.run(execute_test_ticket(args, providers, settings))
    except QuolarError as e:
        click.echo(f"Error: {e}", err=True)
        log.debug("test_ticket_error", exc_info=True)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        sys.exit(130)

    if output == "json":
        click.echo(json.dumps(result_to_dict(result), indent=2))
    else:
        click.echo(format_result(result))

    if not result.success:
        sys.exit(1)
