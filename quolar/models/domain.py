"""
Domain models for the Quolar workflow.

This module contains the data classes exchanged between the workflow engine
and the capability providers. They are the normalized internal
representation; provider adapters convert vendor payloads (Linear issues,
Playwright reports, GitHub pull requests) into these shapes.

Example:
    Creating a ticket from provider data::

        ticket = Ticket(
            id="ENG-123",
            title="Login with SSO",
            description="Users should be able to log in with Google",
            status=TicketStatus.TODO,
            priority=TicketPriority.HIGH,
            labels=["auth", "e2e"],
        )
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from quolar.enums import FailureCategory, TicketPriority, TicketStatus


def _utcnow() -> datetime:
    return datetime.now(UTC)


# -----------------------------------------------------------------------------
# Tickets
# -----------------------------------------------------------------------------


@dataclass
class Ticket:
    """Represents a work item from any ticket system.

    The engine never mutates a ticket except to attach acceptance criteria,
    which it does by producing a copy.
    """

    id: str
    """Ticket identifier as shown to users (e.g. "ENG-123")."""

    title: str
    """Single-line ticket summary."""

    description: str
    """Full ticket description, usually markdown."""

    status: TicketStatus
    """Normalized workflow status."""

    priority: TicketPriority
    """Normalized priority."""

    labels: list[str] = field(default_factory=list)
    """Label names; copied verbatim into the test plan tags."""

    assignee: str | None = None
    """Username of the assignee, if any."""

    acceptance_criteria: list[str] = field(default_factory=list)
    """Ordered acceptance criteria.

    Derived by the ticket provider from the description, not authoritative.
    Each criterion becomes one step of the generated test plan.
    """

    metadata: dict[str, Any] = field(default_factory=dict)
    """Free-form provider-specific data."""


@dataclass
class TicketUpdate:
    """Partial update for a ticket; ``None`` fields are left unchanged."""

    status: TicketStatus | None = None
    labels: list[str] | None = None
    comment: str | None = None
    metadata: dict[str, Any] | None = None


# -----------------------------------------------------------------------------
# Documentation
# -----------------------------------------------------------------------------


@dataclass
class Document:
    """A documentation page returned by a docs provider."""

    id: str
    title: str
    content: str
    path: str
    category: str
    tags: list[str] = field(default_factory=list)
    last_updated: datetime = field(default_factory=_utcnow)


@dataclass
class PatternResult:
    """A ranked match from a documentation pattern search."""

    id: str
    title: str
    relevance: float
    snippet: str
    document_id: str


# -----------------------------------------------------------------------------
# Test plans and results
# -----------------------------------------------------------------------------


@dataclass
class TestStep:
    """A single action in a test plan."""

    __test__ = False

    action: str
    """Action verb understood by the test framework (e.g. "verify", "click")."""

    selector: str | None = None
    value: str | None = None
    assertion: str | None = None
    screenshot: bool = False


@dataclass
class TestPlan:
    """Structured test plan derived from a ticket.

    Created once per run from the ticket's acceptance criteria and not
    changed afterwards.
    """

    __test__ = False

    name: str
    """Slug used for the generated test file (e.g. "test-eng-123")."""

    description: str
    """Human-readable description, taken from the ticket title."""

    steps: list[TestStep] = field(default_factory=list)
    fixtures: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)


@dataclass
class TestFailure:
    """A single failing test reported by the test framework."""

    __test__ = False

    test_name: str
    error: str
    stack_trace: str | None = None
    screenshot: str | None = None
    timestamp: datetime = field(default_factory=_utcnow)


@dataclass
class TestResults:
    """Outcome of one test framework execution.

    Example:
        Checking whether healing is needed::

            if results.failed > 0:
                for failure in results.failures:
                    print(failure.test_name, failure.error)
    """

    __test__ = False

    test_suite: str
    passed: int
    failed: int
    skipped: int
    duration: float
    """Execution time in milliseconds, as reported by the framework."""

    failures: list[TestFailure] = field(default_factory=list)
    """Failures in the order the framework reported them."""

    timestamp: datetime = field(default_factory=_utcnow)


@dataclass
class HealResult:
    """Result of a single healing attempt on a failing test."""

    success: bool
    """Whether the framework produced a candidate fix."""

    original_selector: str
    new_selector: str | None = None

    confidence: float = 0.0
    """Confidence in the fix on a 0-100 scale."""

    explanation: str = ""


@dataclass
class FrameworkConfig:
    """Test framework installation details discovered by ``detect()``."""

    name: str
    config_path: str
    test_dir: str
    base_url: str | None = None


@dataclass
class ExecutionConfig:
    """Options for a test framework run; the engine passes the defaults."""

    test_files: list[str] | None = None
    grep: str | None = None
    workers: int | None = None
    retries: int | None = None
    timeout: int | None = None
    headed: bool | None = None


# -----------------------------------------------------------------------------
# Analytics
# -----------------------------------------------------------------------------


@dataclass
class Classification:
    """Analytics classification of a failure."""

    category: FailureCategory
    confidence: float
    suggestion: str
    related_failures: list[str] = field(default_factory=list)


@dataclass
class SimilarFailure:
    """A historical failure resembling a new one."""

    test_name: str
    error: str
    similarity: float
    resolution: str | None = None


@dataclass
class FlakinessData:
    """Flakiness statistics for a test signature (``file:testName``)."""

    test_signature: str
    flakiness_score: float
    total_runs: int
    failed_runs: int
    last_failure: datetime | None = None


# -----------------------------------------------------------------------------
# Version control
# -----------------------------------------------------------------------------


@dataclass
class PROptions:
    """Options for opening a pull request."""

    title: str
    body: str
    branch: str
    base_branch: str | None = None
    """Target branch; the VCS provider picks its default when ``None``."""

    draft: bool = False
    labels: list[str] = field(default_factory=list)
    reviewers: list[str] = field(default_factory=list)


@dataclass
class PRResult:
    """A pull request opened by the VCS provider."""

    url: str
    number: int
    branch: str
