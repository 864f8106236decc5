"""The ``validate-config`` command."""

import sys

import click
import structlog

from quolar.config.settings import QuolarSettings
from quolar.exceptions import ConfigurationError

log = structlog.get_logger(__name__)


def _print_section(name: str, value: str | None) -> None:
    if value:
        click.echo(f"  {click.style('[OK]', fg='green')} {name}: {value}")
    else:
        click.echo(f"  {click.style('[--]', fg='yellow')} {name}: not configured")


@click.command("validate-config")
@click.pass_context
def validate_config(ctx: click.Context) -> None:
    """Load and validate the configuration, then print a summary."""
    try:
        settings = QuolarSettings.load(ctx.ensure_object(dict).get("config_path"))
    except ConfigurationError as e:
        click.echo(f"Error: {e.message}", err=True)
        log.debug("config_error", exc_info=True)
        sys.exit(1)

    click.echo("Configuration is valid")
    _print_section("Test framework", settings.test_framework.provider)
    _print_section("Tickets", settings.tickets.provider)
    _print_section("Documentation", settings.documentation.provider if settings.documentation_enabled else None)
    _print_section("Analytics", settings.analytics.provider if settings.analytics_enabled else None)
    _print_section("VCS", settings.vcs.provider)

    workflow = settings.workflow
    click.echo(
        f"  Workflow: healing threshold {workflow.auto_healing_threshold:g}%, "
        f"{workflow.parallel_agents} parallel agent(s), max retries {workflow.max_retries}"
    )
