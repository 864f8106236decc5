"""CLI entry point for Quolar."""

import click
import structlog

from quolar import __version__
from quolar.cli.test_ticket import test_ticket_command
from quolar.cli.validate import validate_config
from quolar.utils.logging_config import configure_logging

log = structlog.get_logger(__name__)


@click.group()
@click.version_option(__version__, prog_name="quolar")
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(),
    help="Path to configuration file (default: search the current directory)",
)
@click.option("--log-level", default="INFO", help="Logging level")
@click.option(
    "--log-format",
    type=click.Choice(["json", "console"]),
    default="json",
    help="Log output format",
)
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, log_level: str, log_format: str) -> None:
    """Quolar: turn tickets into tested pull requests."""
    configure_logging(log_level, log_format)
    ctx.obj = {"config_path": config_path}


cli.add_command(test_ticket_command)
cli.add_command(validate_config)


if __name__ == "__main__":
    cli()
