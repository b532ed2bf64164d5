"""Inline source annotations for failed tests."""

import logging

from phpci.test_action.models.test_result import TestFailure
from phpci.test_action.workflow import annotate

logger = logging.getLogger(__name__)

TRACE_LINES = 3


def report_failures(failures: list[TestFailure]) -> None:
    """Create one annotation per failure."""
    logger.debug(f"Creating {len(failures)} annotations for test failures")
    for failure in failures:
        annotate(
            "warning" if failure.kind == "warning" else "error",
            format_message(failure),
            file=failure.file or None,
            line=failure.line or None,
            title=f"{failure.test_class or 'Test'}: {failure.test_name}",
        )


def format_message(failure: TestFailure) -> str:
    """Failure message followed by the first lines of its trace."""
    if not failure.trace:
        return failure.message
    trace_lines = failure.trace.split("\n")[:TRACE_LINES]
    return failure.message + "\n\n" + "\n".join(trace_lines)
