"""Human-readable renderings of coverage data."""

from pathlib import PurePosixPath

from phpci.test_action.models.coverage import CoverageData, FileCoverage


def format_summary(coverage: CoverageData) -> str:
    """Render the project summary as a markdown table."""
    summary = coverage.summary
    rows = [
        ("Lines", summary.lines),
        ("Methods", summary.methods),
        ("Classes", summary.classes),
    ]

    lines = [
        "",
        "## Coverage Summary",
        "",
        "| Metric | Coverage |",
        "|--------|----------|",
    ]
    for label, metric in rows:
        lines.append(
            f"| {label} | {metric.covered}/{metric.total} ({metric.percentage:.2f}%) |"
        )
    lines.append(f"| **Overall** | **{summary.overall:.2f}%** |")
    return "\n".join(lines) + "\n"


def lowest_coverage_files(coverage: CoverageData, limit: int) -> list[FileCoverage]:
    """Return up to *limit* files, lowest line coverage first.

    The sort is stable: files with equal coverage keep their report order.
    """
    ranked = sorted(coverage.files.values(), key=lambda f: f.lines.percentage)
    return ranked[:limit]


def format_file_coverage(coverage: CoverageData, limit: int = 10) -> str:
    """Render the least covered files as a markdown table."""
    files = lowest_coverage_files(coverage, limit)
    if not files:
        return ""

    lines = [
        "",
        "## Files with Lowest Coverage",
        "",
        "| File | Lines | Methods |",
        "|------|-------|----------|",
    ]
    for file in files:
        name = PurePosixPath(file.path).name or file.path
        lines.append(
            f"| {name} | {file.lines.percentage:.1f}% | {file.methods.percentage:.1f}% |"
        )
    return "\n".join(lines) + "\n"


def format_for_console(coverage: CoverageData) -> str:
    """Render the project summary for the build log."""
    summary = coverage.summary
    return "\n".join(
        [
            "Coverage Summary:",
            f"  Lines:   {summary.lines.percentage:.2f}% "
            f"({summary.lines.covered}/{summary.lines.total})",
            f"  Methods: {summary.methods.percentage:.2f}% "
            f"({summary.methods.covered}/{summary.methods.total})",
            f"  Classes: {summary.classes.percentage:.2f}% "
            f"({summary.classes.covered}/{summary.classes.total})",
            f"  Overall: {summary.overall:.2f}%",
        ]
    )


def format_for_pr_comment(coverage: CoverageData) -> str:
    """Render the summary and the 5 least covered files."""
    return (
        "## Test Coverage Report\n\n"
        + format_summary(coverage)
        + format_file_coverage(coverage, limit=5)
    )


def status_emoji(percentage: float, threshold: float) -> str:
    """Return a traffic-light emoji for *percentage* relative to *threshold*."""
    if percentage >= threshold:
        return "✅"
    if percentage >= threshold * 0.9:
        return "⚠️"
    return "❌"


def coverage_badge_url(percentage: float) -> str:
    """Return a shields.io badge URL for *percentage*."""
    if percentage >= 80:
        color = "brightgreen"
    elif percentage >= 60:
        color = "yellow"
    elif percentage >= 40:
        color = "orange"
    else:
        color = "red"

    return f"https://img.shields.io/badge/coverage-{percentage:.1f}%25-{color}"


def format_coverage_badge(percentage: float) -> str:
    """Return the coverage badge as a markdown image."""
    return f"![Coverage]({coverage_badge_url(percentage)})"
