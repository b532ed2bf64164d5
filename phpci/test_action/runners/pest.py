"""Pest test runner."""

from phpci.test_action.results.base import ResultParser
from phpci.test_action.results.text import PestOutputParser
from phpci.test_action.runners.base import TestRunner


class PestRunner(TestRunner):
    """Runs ``vendor/bin/pest``.

    Pest reads the PHPUnit configuration and accepts PHPUnit's coverage and
    JUnit options, but not the suite or fail-on flags.
    """

    framework_name = "Pest"
    executable = "vendor/bin/pest"

    def build_command(self) -> list[str]:
        """Build Pest arguments."""
        args = [
            *self.config.config_args(),
            *self.config.coverage_args(),
            *self.config.junit_args(),
        ]
        if self.config.inputs.verbose:
            args.append("--verbose")
        args.extend(self.config.test_path_args())
        return args

    def output_parser(self) -> ResultParser:
        """Parse Pest's console summary."""
        return PestOutputParser(self.framework_name)
