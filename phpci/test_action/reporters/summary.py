"""Markdown job summary of the test run."""

import logging

from phpci.test_action.models.coverage import CoverageData
from phpci.test_action.models.test_result import TestResult
from phpci.test_action.workflow import append_summary

logger = logging.getLogger(__name__)

MAX_LISTED_FAILURES = 10


def _table(header: tuple[str, str], rows: list[tuple[str, str]]) -> list[str]:
    lines = [f"| {header[0]} | {header[1]} |", "| --- | --- |"]
    lines.extend(f"| {label} | {value} |" for label, value in rows)
    return lines


def coverage_emoji(percentage: float) -> str:
    """Traffic light for overall coverage."""
    if percentage >= 80:
        return "✅"
    if percentage >= 60:
        return "⚠️"
    return "❌"


def _flag(count: int, emoji: str) -> str:
    return f"{emoji} {count}" if count > 0 else "0"


def build_summary(result: TestResult, coverage: CoverageData | None) -> str:
    """Render the results, coverage and leading failures as markdown."""
    succeeded = result.status == "success"
    lines = [f"## {'✅' if succeeded else '❌'} {result.framework} Test Results", ""]
    lines += _table(
        ("Metric", "Value"),
        [
            ("Status", "✅ Passed" if succeeded else "❌ Failed"),
            ("Total Tests", str(result.total)),
            ("Passed", f"✅ {result.passed}"),
            ("Failed", _flag(result.failed, "❌")),
            ("Skipped", _flag(result.skipped, "⚠️")),
            ("Incomplete", _flag(result.incomplete, "⚠️")),
            ("Execution Time", f"{result.execution_time:.2f}s"),
        ],
    )

    if coverage is not None:
        summary = coverage.summary
        lines += ["", "### Coverage Summary", ""]
        lines += _table(
            ("Metric", "Coverage"),
            [
                ("Lines", f"{summary.lines.percentage:.2f}%"),
                ("Methods", f"{summary.methods.percentage:.2f}%"),
                ("Classes", f"{summary.classes.percentage:.2f}%"),
                (
                    "Overall",
                    f"{coverage_emoji(summary.overall)} {summary.overall:.2f}%",
                ),
            ],
        )

    if result.failures:
        lines += ["", "### Test Failures"]
        for failure in result.failures[:MAX_LISTED_FAILURES]:
            lines += [
                "",
                f"**{failure.test_class or 'Test'}: {failure.test_name}**",
                f"{failure.file}:{failure.line}",
                "",
                "```text",
                failure.message,
                "```",
            ]
        hidden = len(result.failures) - MAX_LISTED_FAILURES
        if hidden > 0:
            lines += ["", f"_...and {hidden} more failures_"]

    return "\n".join(lines) + "\n"


def report_summary(result: TestResult, coverage: CoverageData | None) -> None:
    """Append the summary to the job summary file."""
    logger.debug("Generating job summary")
    append_summary(build_summary(result, coverage))
    logger.debug("Job summary generated successfully")
