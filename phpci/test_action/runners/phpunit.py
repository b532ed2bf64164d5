"""PHPUnit test runner."""

from phpci.test_action.results.base import ResultParser
from phpci.test_action.results.text import PHPUnitOutputParser
from phpci.test_action.runners.base import TestRunner


class PHPUnitRunner(TestRunner):
    """Runs ``vendor/bin/phpunit``."""

    framework_name = "PHPUnit"
    executable = "vendor/bin/phpunit"

    def build_command(self) -> list[str]:
        """Build PHPUnit arguments."""
        return [
            *self.config.config_args(),
            *self.config.test_suite_args(),
            *self.config.coverage_args(),
            *self.config.junit_args(),
            *self.config.additional_args(),
            *self.config.test_path_args(),
        ]

    def output_parser(self) -> ResultParser:
        """Parse PHPUnit's console summary."""
        return PHPUnitOutputParser(self.framework_name)
