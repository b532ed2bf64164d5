"""Publish results to GitHub: outputs, annotations, summary and PR comment."""

import logging

import aiohttp

from phpci.test_action.coverage.reporter import coverage_badge_url
from phpci.test_action.models.action_inputs import ActionInputs
from phpci.test_action.models.coverage import CoverageData
from phpci.test_action.models.github_config import GitHubApiConfig
from phpci.test_action.models.test_result import TestResult
from phpci.test_action.reporters.annotations import report_failures
from phpci.test_action.reporters.pr_comment import (
    PRCommentReporter,
    pull_request_number,
)
from phpci.test_action.reporters.summary import report_summary
from phpci.test_action.workflow import group, set_output

logger = logging.getLogger(__name__)


class GitHubReporter:
    """Reports a finished run to the GitHub Actions job."""

    def __init__(self, inputs: ActionInputs) -> None:
        """Initialize reporter with the action inputs."""
        self.inputs = inputs

    async def report(self, result: TestResult, coverage: CoverageData | None) -> None:
        """Publish everything; errors are logged and never raised."""
        with group("Reporting results to GitHub"):
            try:
                self.set_outputs(result, coverage)

                if result.failures:
                    report_failures(result.failures)

                report_summary(result, coverage)

                if self.inputs.coverage.comment and coverage is not None:
                    await self.post_pr_comment(result, coverage)

                logger.info("GitHub reporting completed")
            except (OSError, RuntimeError, aiohttp.ClientError) as e:
                logger.error(f"Failed to report to GitHub: {e}")

    def set_outputs(self, result: TestResult, coverage: CoverageData | None) -> None:
        """Expose counts and coverage as step outputs."""
        set_output("test-result", result.status)
        set_output("tests-total", result.total)
        set_output("tests-passed", result.passed)
        set_output("tests-failed", result.failed)
        set_output("tests-skipped", result.skipped)
        set_output("tests-incomplete", result.incomplete)

        if coverage is not None:
            summary = coverage.summary
            set_output("coverage-percentage", f"{summary.overall:.2f}")
            set_output("coverage-lines", f"{summary.lines.percentage:.2f}")
            set_output("coverage-methods", f"{summary.methods.percentage:.2f}")
            set_output("coverage-classes", f"{summary.classes.percentage:.2f}")
            set_output("coverage-report-path", self.inputs.coverage.clover_path)
            set_output("coverage-badge", coverage_badge_url(summary.overall))

        logger.debug("Action outputs set successfully")

    async def post_pr_comment(self, result: TestResult, coverage: CoverageData) -> None:
        """Comment on the pull request, when running for one."""
        pr_number = pull_request_number()
        if pr_number is None:
            logger.info("Not running for a pull request, skipping coverage comment")
            return

        config = GitHubApiConfig.from_env(self.inputs.github_token)
        if config is None:
            logger.warning("No GitHub token or repository, skipping coverage comment")
            return

        await PRCommentReporter(config, pr_number).report(result, coverage)
