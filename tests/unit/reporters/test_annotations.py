"""Tests for failure annotations."""

import pytest

from phpci.test_action.models.test_result import TestFailure
from phpci.test_action.reporters.annotations import format_message, report_failures


def test_format_message_includes_first_trace_lines() -> None:
    """Only the first three trace lines are appended."""
    failure = TestFailure(
        test_name="testAdd",
        message="Failed asserting that 1 matches expected 2.",
        trace="line1\nline2\nline3\nline4",
    )

    assert format_message(failure) == (
        "Failed asserting that 1 matches expected 2.\n\nline1\nline2\nline3"
    )


def test_format_message_without_trace() -> None:
    """Without a trace the message is used as is."""
    assert format_message(TestFailure(test_name="t", message="boom")) == "boom"


def test_report_failures(capsys: pytest.CaptureFixture[str]) -> None:
    """One annotation is written per failure."""
    report_failures(
        [
            TestFailure(
                test_name="testAdd",
                test_class="CalculatorTest",
                file="tests/CalculatorTest.php",
                line=12,
                message="boom",
            ),
            TestFailure(test_name="testWarn", message="careful", kind="warning"),
        ]
    )

    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        "::error title=CalculatorTest%3A testAdd,file=tests/CalculatorTest.php,"
        "line=12::boom",
        "::warning title=Test%3A testWarn::careful",
    ]
