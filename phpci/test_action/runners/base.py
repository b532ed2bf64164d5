"""Abstract base class for PHP test runners."""

import logging
from abc import ABC, abstractmethod
from pathlib import Path

from phpci.test_action.errors import MalformedDocumentError
from phpci.test_action.models.test_result import TestResult
from phpci.test_action.process import CommandResult, run_command
from phpci.test_action.results.base import ResultParser
from phpci.test_action.results.junit import JUnitResultParser
from phpci.test_action.test_config import TestConfig

logger = logging.getLogger(__name__)


class TestRunner(ABC):
    """Run a PHP test framework and aggregate its results."""

    __test__ = False

    framework_name: str = ""
    executable: str = ""

    def __init__(self, config: TestConfig, working_dir: Path) -> None:
        """Initialize runner for the project in *working_dir*."""
        self.config = config
        self.working_dir = working_dir

    @abstractmethod
    def build_command(self) -> list[str]:
        """Return the arguments passed to the test executable."""

    @abstractmethod
    def output_parser(self) -> ResultParser:
        """Return the parser used when no JUnit report is available."""

    async def run(self) -> TestResult:
        """Run the test suite once and parse its results.

        Blocks until the test process exits; there is no timeout.
        """
        self.config.junit_path.parent.mkdir(parents=True, exist_ok=True)
        self.config.junit_path.unlink(missing_ok=True)

        args = self.build_command()
        logger.info(f"Executing: {self.executable} {' '.join(args)}")

        run = await run_command(self.executable, args, cwd=self.working_dir)
        result = self.parse_results(run)

        logger.info(
            f"Tests completed: {result.passed} passed, {result.failed} failed"
        )
        return result

    def parse_results(self, run: CommandResult) -> TestResult:
        """Prefer the JUnit report, falling back to console output."""
        junit_path = self.config.junit_path
        if junit_path.is_file():
            try:
                return JUnitResultParser(self.framework_name, junit_path).parse(run)
            except MalformedDocumentError as e:
                logger.warning(f"Failed to parse JUnit XML: {e}")
        else:
            logger.debug(f"No JUnit report at {junit_path}, parsing console output")

        return self.output_parser().parse(run)
