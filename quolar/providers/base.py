"""
Abstract base classes for capability providers.

This module defines the five capability interfaces the workflow engine
consumes: tickets, documentation, test framework, version control and
analytics. Concrete adapters (Linear, Quoth, Playwright, GitHub, Exolar,
...) live outside this package and are plugged in through
``quolar.providers.registry``.

All methods are async so adapters can use non-blocking HTTP clients, MCP
sessions or subprocesses. The engine treats every call as an opaque
function call: transport, authentication and payload translation are the
adapter's concern.
"""

from abc import ABC, abstractmethod

from quolar.models.domain import (
    Classification,
    Document,
    ExecutionConfig,
    FlakinessData,
    FrameworkConfig,
    HealResult,
    PatternResult,
    PROptions,
    PRResult,
    SimilarFailure,
    TestFailure,
    TestPlan,
    TestResults,
    Ticket,
    TicketUpdate,
)


class TicketProvider(ABC):
    """Abstract base class for ticket management systems.

    Default implementation: Linear. Alternatives: Jira, GitHub Issues, Asana.

    Attributes:
        name: Provider name used for identification and logging.
    """

    name: str = "tickets"

    @abstractmethod
    async def read(self, ticket_id: str) -> Ticket:
        """Read ticket details by identifier.

        Args:
            ticket_id: The ticket identifier (e.g. "ENG-123").

        Returns:
            Ticket with all fields populated. ``acceptance_criteria`` may be
            empty; the engine fills it from ``get_acceptance_criteria``.

        Raises:
            Implementation-specific exceptions if the ticket does not exist
            or the ticket system is unreachable.
        """
        pass

    @abstractmethod
    async def get_acceptance_criteria(self, ticket_id: str) -> list[str]:
        """Extract acceptance criteria from the ticket.

        Args:
            ticket_id: The ticket identifier.

        Returns:
            Ordered list of criteria. Empty when none could be extracted.
        """
        pass

    @abstractmethod
    async def update(self, ticket_id: str, data: TicketUpdate) -> None:
        """Update status, labels or metadata, or add a comment.

        Only non-``None`` fields of ``data`` are applied (PATCH semantics).

        Args:
            ticket_id: The ticket identifier.
            data: Partial update.
        """
        pass

    @abstractmethod
    async def link_pr(self, ticket_id: str, pr_url: str) -> None:
        """Attach a pull request link to the ticket.

        Args:
            ticket_id: The ticket identifier.
            pr_url: URL of the pull request.
        """
        pass


class DocsProvider(ABC):
    """Abstract base class for documentation systems.

    Default implementation: Quoth. Alternatives: Confluence, Notion, GitBook.
    Optional: a workflow without a docs provider skips pattern search.
    """

    name: str = "documentation"

    @abstractmethod
    async def search_patterns(self, query: str) -> list[PatternResult]:
        """Search for test patterns and documentation.

        Args:
            query: Natural language query; the engine passes the ticket title.

        Returns:
            Pattern matches ranked by relevance (most relevant first).
        """
        pass

    @abstractmethod
    async def read_document(self, doc_id: str) -> Document:
        """Read a full document by identifier or path."""
        pass

    async def propose_update(self, doc_id: str, content: str) -> None:
        """Propose a documentation change.

        This is an optional method - not all documentation systems accept
        proposals. Default implementation raises NotImplementedError.

        Raises:
            NotImplementedError: If the provider does not support proposals.
        """
        raise NotImplementedError("Provider does not support documentation proposals")


class TestFrameworkProvider(ABC):
    """Abstract base class for test frameworks.

    Default implementation: Playwright. Alternatives: Vitest, Cypress,
    WebdriverIO.
    """

    __test__ = False

    name: str = "test_framework"

    @abstractmethod
    async def detect(self) -> FrameworkConfig:
        """Detect the framework installation in the working directory."""
        pass

    @abstractmethod
    async def generate_test(self, plan: TestPlan) -> str:
        """Generate test source code from a test plan.

        Args:
            plan: Plan whose steps map 1:1 to acceptance criteria.

        Returns:
            Generated test source text. Writing it to disk is the
            provider's concern.
        """
        pass

    @abstractmethod
    async def execute(self, config: ExecutionConfig) -> TestResults:
        """Run tests.

        Args:
            config: Execution options. The engine passes
                ``ExecutionConfig()`` so the framework's own defaults apply.

        Returns:
            Aggregated results with failures in reporting order.
        """
        pass

    @abstractmethod
    async def heal(self, failure: TestFailure) -> HealResult:
        """Attempt to heal a failing test.

        Args:
            failure: The failure to heal.

        Returns:
            HealResult with the proposed selector and a 0-100 confidence.
            Whether the fix is accepted is decided by the engine's
            healing threshold, not by the provider.
        """
        pass

    async def get_template(self) -> str:
        """Return the template used for code generation.

        Optional; default implementation raises NotImplementedError.
        """
        raise NotImplementedError("Provider does not expose a test template")


class VCSProvider(ABC):
    """Abstract base class for version control systems.

    Default implementation: GitHub (git + gh CLI). Alternatives: GitLab,
    Bitbucket, Azure DevOps.
    """

    name: str = "vcs"

    @abstractmethod
    async def create_branch(self, name: str, base_branch: str | None = None) -> None:
        """Create and check out a new branch.

        Args:
            name: Branch name.
            base_branch: Branch to start from. When ``None`` the provider
                uses the repository's default branch.
        """
        pass

    @abstractmethod
    async def commit(self, message: str, files: list[str]) -> None:
        """Commit changes.

        Args:
            message: Commit message.
            files: Paths to stage. An empty list lets the provider stage
                whatever it considers changed.
        """
        pass

    @abstractmethod
    async def push(self, branch: str | None = None) -> None:
        """Push a branch (the current one when ``None``) to the remote."""
        pass

    @abstractmethod
    async def create_pr(self, options: PROptions) -> PRResult:
        """Open a pull request.

        Args:
            options: Title, body, head branch and optional extras.

        Returns:
            PRResult with URL, number and branch.
        """
        pass

    @abstractmethod
    async def get_current_branch(self) -> str:
        """Return the name of the checked-out branch."""
        pass

    @abstractmethod
    async def has_changes(self) -> bool:
        """Return True if the working tree has uncommitted changes."""
        pass


class AnalyticsProvider(ABC):
    """Abstract base class for test analytics systems.

    Default implementation: Exolar. Alternatives: DataDog, Allure,
    ReportPortal. Optional: a workflow without analytics skips reporting.
    """

    name: str = "analytics"

    @abstractmethod
    async def report_results(self, results: TestResults) -> None:
        """Report test execution results."""
        pass

    @abstractmethod
    async def classify_failure(self, failure: TestFailure) -> Classification:
        """Classify a failure into a ``FailureCategory`` with a suggestion."""
        pass

    @abstractmethod
    async def find_similar_failures(self, error: str) -> list[SimilarFailure]:
        """Find historical failures similar to an error message."""
        pass

    @abstractmethod
    async def get_flakiness(self, test_signature: str) -> FlakinessData:
        """Return flakiness statistics for ``file:testName``."""
        pass
