"""Fallback parsers reading test counts from console output.

Used when no JUnit report is available. Only totals can be recovered:
incomplete and risky counts and failure details are not reported.
"""

import re

from phpci.test_action.models.test_result import TestResult
from phpci.test_action.process import CommandResult
from phpci.test_action.results.base import ResultParser

_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")

# OK (7 tests, 12 assertions)
_PHPUNIT_OK = re.compile(r"OK \((\d+) tests?, \d+ assertions?\)")
# Tests: 5, Assertions: 9, Failures: 1, Errors: 1, Skipped: 1.
_PHPUNIT_SUMMARY = re.compile(r"Tests: (\d+), Assertions: \d+(?P<counts>[^\n]*)")
_PHPUNIT_COUNT = re.compile(r"(Failures|Errors|Skipped): (\d+)")

# Tests:    1 failed, 2 skipped, 4 passed (9 assertions)
_PEST_SUMMARY = re.compile(r"Tests:\s+(?P<counts>[^\n]*)")
_PEST_COUNT = re.compile(r"(\d+) (passed|failed|skipped)")


def strip_ansi(output: str) -> str:
    """Remove terminal color sequences from *output*."""
    return _ANSI_ESCAPE.sub("", output)


def _status(failed: int, exit_code: int) -> str:
    return "failure" if failed > 0 or exit_code != 0 else "success"


class PHPUnitOutputParser(ResultParser):
    """Parse PHPUnit's closing summary line."""

    def parse(self, run: CommandResult) -> TestResult:
        """Extract counts; unmatched counts default to 0."""
        output = strip_ansi(run.stdout)
        total = failed = skipped = 0

        if ok_match := _PHPUNIT_OK.search(output):
            total = int(ok_match.group(1))
        elif summary_match := _PHPUNIT_SUMMARY.search(output):
            total = int(summary_match.group(1))
            counts = {
                name: int(value)
                for name, value in _PHPUNIT_COUNT.findall(summary_match["counts"])
            }
            failed = counts.get("Failures", 0) + counts.get("Errors", 0)
            skipped = counts.get("Skipped", 0)

        return TestResult(
            framework=self.framework,
            status=_status(failed, run.exit_code),
            total=total,
            passed=total - failed - skipped,
            failed=failed,
            skipped=skipped,
            raw_output=run.stdout,
        )


class PestOutputParser(ResultParser):
    """Parse Pest's ``Tests:`` summary line."""

    def parse(self, run: CommandResult) -> TestResult:
        """Extract counts; the total is the sum of what was found."""
        output = strip_ansi(run.stdout)
        counts: dict[str, int] = {}

        if summary_match := _PEST_SUMMARY.search(output):
            for value, name in _PEST_COUNT.findall(summary_match["counts"]):
                counts[name] = int(value)

        passed = counts.get("passed", 0)
        failed = counts.get("failed", 0)
        skipped = counts.get("skipped", 0)

        return TestResult(
            framework=self.framework,
            status=_status(failed, run.exit_code),
            total=passed + failed + skipped,
            passed=passed,
            failed=failed,
            skipped=skipped,
            raw_output=run.stdout,
        )
