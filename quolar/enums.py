"""Enumerations shared by the Quolar domain models and workflow engine."""

from enum import Enum


class TicketStatus(str, Enum):
    """Normalized ticket status across ticket systems."""

    BACKLOG = "backlog"
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    IN_REVIEW = "in_review"
    DONE = "done"
    CANCELLED = "cancelled"

    def __str__(self) -> str:
        return self.value


class TicketPriority(str, Enum):
    """Normalized ticket priority across ticket systems."""

    URGENT = "urgent"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NONE = "none"

    def __str__(self) -> str:
        return self.value


class FailureCategory(str, Enum):
    """Categories an analytics system may assign to a test failure."""

    ELEMENT_NOT_FOUND = "element_not_found"
    TIMEOUT = "timeout"
    ASSERTION_FAILED = "assertion_failed"
    NETWORK_ERROR = "network_error"
    AUTHENTICATION = "authentication"
    DATA_MISMATCH = "data_mismatch"
    FLAKY = "flaky"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


class WorkflowStep(str, Enum):
    """Identifiers of the steps the orchestrator can run, in pipeline order."""

    ANALYZE_TICKET = "analyze_ticket"
    SEARCH_PATTERNS = "search_patterns"
    GENERATE_TEST_PLAN = "generate_test_plan"
    GENERATE_CODE = "generate_code"
    EXECUTE_TESTS = "execute_tests"
    HEAL_FAILURES = "heal_failures"
    CREATE_PR = "create_pr"
    REPORT_RESULTS = "report_results"

    def __str__(self) -> str:
        return self.value
