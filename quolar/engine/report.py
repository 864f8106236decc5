"""Rendering of workflow results for people and machines.

``format_result`` produces the markdown summary printed by the CLI;
``result_to_dict`` produces a JSON-serializable mapping for ``--output json``.
"""

from typing import Any

from quolar.engine.types import StepResult, WorkflowResult


def format_result(result: WorkflowResult) -> str:
    """Render a workflow result as markdown.

    Args:
        result: Result returned by ``WorkflowOrchestrator.execute``.

    Returns:
        Markdown text: outcome heading, errors (on failure), the step list,
        and the PR link and test counts when available.
    """
    context = result.context
    lines: list[str] = []

    if result.success:
        lines.append("## Test Automation Complete")
        lines.append("")
        lines.append(f"**Ticket:** {context.ticket_id}")
        lines.append(f"**Duration:** {result.total_duration}ms")
    else:
        lines.append("## Test Automation Failed")
        lines.append("")
        lines.append("### Errors")
        for error in context.errors:
            lines.append(f"- **{error.step}:** {error.message}")

    lines.append("")
    lines.append("### Workflow Steps")
    for step in result.steps:
        icon = "✅" if step.success else "❌"
        lines.append(f"{icon} {step.step} ({step.duration}ms)")

    if context.pr_result is not None:
        url = context.pr_result.url
        lines.append("")
        lines.append("### Pull Request")
        lines.append(f"[{url}]({url})")

    if context.test_results is not None:
        results = context.test_results
        lines.append("")
        lines.append("### Test Results")
        lines.append(f"- Passed: {results.passed}")
        lines.append(f"- Failed: {results.failed}")
        lines.append(f"- Skipped: {results.skipped}")

    return "\n".join(lines)


def _step_to_dict(step: StepResult) -> dict[str, Any]:
    entry: dict[str, Any] = {
        "step": str(step.step),
        "success": step.success,
        "message": step.message,
        "duration": step.duration,
    }
    # Step payloads may hold domain objects; only keep plain values
    if isinstance(step.data, dict):
        entry["data"] = {key: value for key, value in step.data.items() if _is_plain(value)}
    return entry


def _is_plain(value: Any) -> bool:
    if isinstance(value, (str, int, float, bool)) or value is None:
        return True
    if isinstance(value, (list, tuple)):
        return all(_is_plain(item) for item in value)
    return False


def result_to_dict(result: WorkflowResult) -> dict[str, Any]:
    """Convert a workflow result into a JSON-serializable mapping."""
    context = result.context
    payload: dict[str, Any] = {
        "success": result.success,
        "ticket_id": context.ticket_id,
        "total_duration": result.total_duration,
        "steps": [_step_to_dict(step) for step in result.steps],
        "errors": [
            {
                "step": error.step,
                "message": error.message,
                "recoverable": error.recoverable,
                "timestamp": error.timestamp.isoformat(),
            }
            for error in context.errors
        ],
        "pr": None,
        "test_results": None,
    }

    if context.pr_result is not None:
        payload["pr"] = {
            "url": context.pr_result.url,
            "number": context.pr_result.number,
            "branch": context.pr_result.branch,
        }

    if context.test_results is not None:
        results = context.test_results
        payload["test_results"] = {
            "test_suite": results.test_suite,
            "passed": results.passed,
            "failed": results.failed,
            "skipped": results.skipped,
            "duration": results.duration,
            "failures": [
                {"test_name": failure.test_name, "error": failure.error} for failure in results.failures
            ],
        }

    return payload
