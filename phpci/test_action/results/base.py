"""Common interface for turning a test run into a TestResult."""

from abc import ABC, abstractmethod

from phpci.test_action.models.test_result import TestResult
from phpci.test_action.process import CommandResult


class ResultParser(ABC):
    """Strategy that extracts test counts from one kind of test output."""

    def __init__(self, framework: str) -> None:
        """Initialize parser for the given framework display name."""
        self.framework = framework

    @abstractmethod
    def parse(self, run: CommandResult) -> TestResult:
        """Build a TestResult from the finished test process.

        Args:
            run: Exit code and captured output of the test process

        Returns:
            Aggregated test result

        Raises:
            MalformedDocumentError: If the parser's input cannot be read

        """
