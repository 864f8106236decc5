"""Quolar: turn a ticket into generated, executed and self-healed tests.

Quolar reads a ticket, derives a test plan from its acceptance criteria,
asks a test framework to generate and run the tests, attempts to heal
failing selectors, and opens a pull request with the results.

Example:
    >>> from quolar.engine.orchestrator import WorkflowOrchestrator
    >>> orchestrator = WorkflowOrchestrator(providers, settings)
    >>> result = await orchestrator.execute(WorkflowOptions(ticket_id="ENG-123"))
"""

__version__ = "0.1.0"
