"""Domain models exchanged between the workflow engine and its providers.

Key Models:
    - Ticket / TicketUpdate: Work item driving a workflow run
    - TestPlan / TestStep: Plan derived from acceptance criteria
    - TestResults / TestFailure: Output of a test framework run
    - HealResult: Outcome of a healing attempt
    - PROptions / PRResult: Pull request request and response

Example:
    >>> from quolar.models import Ticket, TestPlan
"""

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
    TestStep,
    Ticket,
    TicketUpdate,
)

__all__ = [
    "Classification",
    "Document",
    "ExecutionConfig",
    "FlakinessData",
    "FrameworkConfig",
    "HealResult",
    "PROptions",
    "PRResult",
    "PatternResult",
    "SimilarFailure",
    "TestFailure",
    "TestPlan",
    "TestResults",
    "TestStep",
    "Ticket",
    "TicketUpdate",
]
