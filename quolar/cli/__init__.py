"""CLI commands for Quolar."""

from quolar.cli.test_ticket import TestTicketArgs, execute_test_ticket, test_ticket_command
from quolar.cli.validate import validate_config

__all__ = ["TestTicketArgs", "execute_test_ticket", "test_ticket_command", "validate_config"]
