"""Pytest configuration and shared fixtures."""

import logging
from unittest.mock import AsyncMock

import pytest
import structlog

from quolar.config.settings import QuolarSettings
from quolar.engine.types import WorkflowProviders
from quolar.enums import TicketPriority, TicketStatus
from quolar.models.domain import HealResult, PRResult, TestFailure, TestResults, Ticket
from quolar.providers.base import (
    AnalyticsProvider,
    DocsProvider,
    TestFrameworkProvider,
    TicketProvider,
    VCSProvider,
)

CRITERIA = [
    "User can sign in with Google",
    "User sees an error for a revoked account",
]


@pytest.fixture(autouse=True)
def quiet_logging():
    """Drop log output during tests."""
    structlog.configure(
        processors=[structlog.processors.JSONRenderer()],
        wrapper_class=structlog.make_filtering_bound_logger(logging.CRITICAL),
        logger_factory=structlog.ReturnLoggerFactory(),
        cache_logger_on_first_use=False,
    )
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def sample_ticket() -> Ticket:
    """Sample ticket as returned by a ticket provider (criteria not attached)."""
    return Ticket(
        id="ENG-123",
        title="Login with SSO",
        description="Users should be able to log in with Google.",
        status=TicketStatus.TODO,
        priority=TicketPriority.HIGH,
        labels=["auth", "e2e"],
    )


def build_results(passed: int = 5, failed: int = 0, skipped: int = 0, failures=None) -> TestResults:
    if failures is None:
        failures = [TestFailure(test_name=f"test {i}", error="locator not found") for i in range(failed)]
    return TestResults(
        test_suite="e2e",
        passed=passed,
        failed=failed,
        skipped=skipped,
        duration=1.5,
        failures=failures,
    )


@pytest.fixture
def make_results():
    """Factory for TestResults; failures default to one per failed test."""
    return build_results


@pytest.fixture
def mock_tickets(sample_ticket: Ticket) -> AsyncMock:
    """Create a mock TicketProvider."""
    tickets = AsyncMock(spec=TicketProvider)
    tickets.read = AsyncMock(return_value=sample_ticket)
    tickets.get_acceptance_criteria = AsyncMock(return_value=list(CRITERIA))
    tickets.update = AsyncMock()
    tickets.link_pr = AsyncMock()
    return tickets


@pytest.fixture
def mock_framework() -> AsyncMock:
    """Create a mock TestFrameworkProvider."""
    framework = AsyncMock(spec=TestFrameworkProvider)
    framework.generate_test = AsyncMock(return_value="test('login', async () => {});")
    framework.execute = AsyncMock(return_value=build_results())
    framework.heal = AsyncMock(
        return_value=HealResult(success=True, original_selector="#old", new_selector="#new", confidence=90)
    )
    return framework


@pytest.fixture
def mock_vcs() -> AsyncMock:
    """Create a mock VCSProvider."""
    vcs = AsyncMock(spec=VCSProvider)
    vcs.create_branch = AsyncMock()
    vcs.commit = AsyncMock()
    vcs.push = AsyncMock()
    vcs.create_pr = AsyncMock(
        return_value=PRResult(url="https://github.com/acme/app/pull/7", number=7, branch="test/eng-123")
    )
    return vcs


@pytest.fixture
def mock_docs() -> AsyncMock:
    """Create a mock DocsProvider."""
    docs = AsyncMock(spec=DocsProvider)
    docs.search_patterns = AsyncMock(return_value=[])
    return docs


@pytest.fixture
def mock_analytics() -> AsyncMock:
    """Create a mock AnalyticsProvider."""
    analytics = AsyncMock(spec=AnalyticsProvider)
    analytics.report_results = AsyncMock()
    return analytics


@pytest.fixture
def providers(mock_tickets, mock_framework, mock_vcs) -> WorkflowProviders:
    """Required providers only (no documentation, no analytics)."""
    return WorkflowProviders(ticket=mock_tickets, vcs=mock_vcs, test_framework=mock_framework)


@pytest.fixture
def config_dict() -> dict:
    """Minimal valid configuration mapping."""
    return {
        "test_framework": {"provider": "playwright", "test_dir": "./e2e"},
        "tickets": {"provider": "linear", "workspace": "acme"},
    }


@pytest.fixture
def settings(config_dict: dict) -> QuolarSettings:
    """Validated settings with defaults for everything optional."""
    return QuolarSettings.from_dict(config_dict)
