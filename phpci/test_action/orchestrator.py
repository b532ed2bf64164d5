"""Test pipeline coordinating a single run of the action."""

import logging

from pydantic import BaseModel

from phpci.test_action.cache.base import CacheBackend
from phpci.test_action.cache.manager import CacheManager
from phpci.test_action.codecov import upload_coverage
from phpci.test_action.coverage.parser import parse_coverage_file
from phpci.test_action.coverage.reporter import format_for_console
from phpci.test_action.coverage.threshold import evaluate_overall, evaluate_per_metric
from phpci.test_action.database.config import DatabaseConfig
from phpci.test_action.database.provision import DatabaseSetup
from phpci.test_action.dependencies import install_dependencies
from phpci.test_action.detectors.composer import ComposerAnalyzer
from phpci.test_action.detectors.extensions import check_php_extensions
from phpci.test_action.detectors.framework import FrameworkDetector
from phpci.test_action.detectors.project_type import ProjectTypeDetector
from phpci.test_action.models.action_inputs import ActionInputs, TestFramework
from phpci.test_action.models.coverage import CoverageData
from phpci.test_action.models.test_result import TestResult
from phpci.test_action.reporters.github import GitHubReporter
from phpci.test_action.runners.base import TestRunner
from phpci.test_action.runners.pest import PestRunner
from phpci.test_action.runners.phpunit import PHPUnitRunner
from phpci.test_action.test_config import TestConfig
from phpci.test_action.workflow import group

logger = logging.getLogger(__name__)


class PipelineOutcome(BaseModel):
    """Final verdict of a pipeline run."""

    success: bool
    message: str
    result: TestResult
    coverage: CoverageData | None = None


def create_runner(
    framework: TestFramework, config: TestConfig, inputs: ActionInputs
) -> TestRunner:
    """Return the runner for *framework*."""
    if framework == "pest":
        return PestRunner(config, inputs.working_directory)
    return PHPUnitRunner(config, inputs.working_directory)


class TestPipeline:
    """Runs every stage of the action in order."""

    __test__ = False

    def __init__(
        self, inputs: ActionInputs, cache_backend: CacheBackend | None = None
    ) -> None:
        """Initialize pipeline with resolved inputs."""
        self.inputs = inputs
        self.cache = CacheManager(inputs.cache, inputs.working_directory, cache_backend)

    async def run(self) -> PipelineOutcome:
        """Run the action once.

        Raises:
            PipelineFatalError: If the project has no usable composer.json

        """
        inputs = self.inputs
        logger.info("PHP Test Action started")
        logger.debug(f"Working directory: {inputs.working_directory}")

        await self.cache.restore()

        composer = ComposerAnalyzer()
        composer.analyze(inputs.working_directory)

        with group("Installing dependencies"):
            await install_dependencies(inputs.working_directory, inputs.composer_args)
            await check_php_extensions(inputs.php_extensions)

        with group("Detecting test framework"):
            framework = FrameworkDetector(composer, inputs.test_framework).detect()
        with group("Detecting project type"):
            project_type = ProjectTypeDetector(composer).detect()

        logger.info(f"Project type: {project_type}")
        logger.info(f"Test framework: {framework}")

        config = TestConfig(inputs, framework)
        if config.should_run_functional_tests():
            database = DatabaseConfig(inputs.database, inputs.working_directory)
            if database.is_enabled():
                with group("Setting up database"):
                    await DatabaseSetup(database, project_type).setup()

        if inputs.coverage.enabled:
            inputs.coverage.output.mkdir(parents=True, exist_ok=True)
            logger.debug(f"Coverage output directory: {inputs.coverage.output}")

        runner = create_runner(framework, config, inputs)
        with group(f"Running {runner.framework_name} tests"):
            result = await runner.run()

        coverage, threshold_message = await self._process_coverage()

        await GitHubReporter(inputs).report(result, coverage)

        outcome = self.decide(result, coverage, threshold_message)
        if outcome.success:
            logger.info(outcome.message)
        else:
            logger.error(outcome.message)

        await self.cache.save()
        return outcome

    async def _process_coverage(self) -> tuple[CoverageData | None, str | None]:
        """Parse coverage and check thresholds.

        Returns:
            Coverage (None when disabled or unusable) and the message of the
            first unmet threshold, if any

        """
        settings = self.inputs.coverage
        if not settings.enabled:
            return None, None

        with group("Parsing coverage report"):
            coverage = parse_coverage_file(settings.clover_path)
        if coverage is None:
            return None, None

        logger.info("\n" + format_for_console(coverage))

        failures: list[str] = []
        if settings.threshold > 0:
            overall = evaluate_overall(coverage, settings.threshold)
            if not overall.met:
                failures.append(overall.message)

        if not settings.metric_thresholds.is_empty():
            per_metric = evaluate_per_metric(coverage, settings.metric_thresholds)
            failures.extend(r.message for r in per_metric.results.values() if not r.met)

        if self.inputs.codecov.upload:
            await upload_coverage(settings.clover_path, self.inputs.codecov.token)

        return coverage, failures[0] if failures else None

    def decide(
        self,
        result: TestResult,
        coverage: CoverageData | None,
        threshold_message: str | None,
    ) -> PipelineOutcome:
        """Pick the dominant reason for failing, or report success."""
        inputs = self.inputs

        if result.status == "failure" or result.failed > 0:
            message = (
                f"Tests failed: {result.failed} failure(s), {result.passed} passed"
            )
        elif inputs.fail_on_skipped and result.skipped > 0:
            message = f"Tests skipped: {result.skipped} test(s) were skipped"
        elif inputs.fail_on_incomplete and result.incomplete > 0:
            message = f"Tests incomplete: {result.incomplete} test(s) were incomplete"
        elif inputs.fail_on_risky and result.risky > 0:
            message = f"Tests risky: {result.risky} test(s) were risky"
        elif threshold_message is not None:
            message = threshold_message
        else:
            return PipelineOutcome(
                success=True,
                message=f"All tests passed! ({result.passed}/{result.total})",
                result=result,
                coverage=coverage,
            )

        return PipelineOutcome(
            success=False, message=message, result=result, coverage=coverage
        )
