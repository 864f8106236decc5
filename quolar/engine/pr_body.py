"""Pull request body rendering."""

from quolar.engine.context import WorkflowContext

DRY_RUN_SUMMARY = "Tests not executed (dry run)"
FOOTER = "Generated by [Quolar](https://github.com/Montinou/quolar)"


def generate_pr_body(context: WorkflowContext) -> str:
    """Render the PR description for a workflow run.

    The output depends only on the context, so identical contexts render
    identical bodies.
    """
    results = context.test_results
    if results is not None:
        summary = f"- Passed: {results.passed}\n- Failed: {results.failed}\n- Skipped: {results.skipped}"
    else:
        summary = DRY_RUN_SUMMARY

    criteria = "\n".join(f"- [ ] {criterion}" for criterion in context.acceptance_criteria)

    body = "## Summary\n"
    body += f"Automated tests generated for ticket {context.ticket_id}\n\n"
    body += "## Test Results\n"
    body += f"{summary}\n\n"
    body += "## Acceptance Criteria Covered\n"
    body += f"{criteria}\n\n"
    body += "---\n"
    body += FOOTER
    return body
