"""Tests for pull request body rendering."""

from quolar.engine.context import WorkflowContext
from quolar.engine.pr_body import generate_pr_body


def make_context(sample_ticket, results=None, criteria=("User can sign in", "Error on revoked account")):
    sample_ticket.acceptance_criteria = list(criteria)
    context = WorkflowContext(ticket_id="ENG-123")
    context.assign("ticket", sample_ticket)
    if results is not None:
        context.assign("test_results", results)
    return context


def test_full_body(sample_ticket, make_results):
    context = make_context(sample_ticket, make_results(passed=5, failed=1, skipped=0))

    body = generate_pr_body(context)

    assert body == (
        "## Summary\n"
        "Automated tests generated for ticket ENG-123\n"
        "\n"
        "## Test Results\n"
        "- Passed: 5\n"
        "- Failed: 1\n"
        "- Skipped: 0\n"
        "\n"
        "## Acceptance Criteria Covered\n"
        "- [ ] User can sign in\n"
        "- [ ] Error on revoked account\n"
        "\n"
        "---\n"
        "Generated by [Quolar](https://github.com/Montinou/quolar)"
    )


def test_dry_run_body(sample_ticket):
    body = generate_pr_body(make_context(sample_ticket))

    assert "Tests not executed (dry run)" in body
    assert "Passed:" not in body


def test_no_criteria(sample_ticket, make_results):
    body = generate_pr_body(make_context(sample_ticket, make_results(), criteria=()))

    assert "## Acceptance Criteria Covered\n\n\n---" in body


def test_reproducible(sample_ticket, make_results):
    context = make_context(sample_ticket, make_results(passed=2, failed=0, skipped=3))

    assert generate_pr_body(context) == generate_pr_body(context)
