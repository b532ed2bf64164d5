"""Tests for the test pipeline."""

import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from phpci.test_action.errors import ComposerManifestNotFoundError
from phpci.test_action.models.action_inputs import (
    ActionInputs,
    CacheSettings,
    CoverageSettings,
    DatabaseSettings,
)
from phpci.test_action.models.coverage import MetricThresholds
from phpci.test_action.models.test_result import TestResult
from phpci.test_action.orchestrator import TestPipeline, create_runner
from phpci.test_action.runners.pest import PestRunner
from phpci.test_action.runners.phpunit import PHPUnitRunner
from phpci.test_action.test_config import TestConfig

CLOVER = """<coverage><project>
  <metrics statements="100" coveredstatements="80" methods="4" coveredmethods="3"
           classes="2" coveredclasses="2"/>
</project></coverage>"""

MODULE = "phpci.test_action.orchestrator"


def make_result(**kwargs: object) -> TestResult:
    """Create a PHPUnit result; counts default to 5 passed."""
    values: dict[str, object] = {
        "framework": "PHPUnit",
        "status": "success",
        "total": 5,
        "passed": 5,
    }
    values.update(kwargs)
    return TestResult.model_validate(values)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A PHP project using PHPUnit."""
    (tmp_path / "composer.json").write_text(
        json.dumps({"require-dev": {"phpunit/phpunit": "^10"}})
    )
    return tmp_path


@pytest.fixture(autouse=True)
def no_github_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Run outside GitHub Actions."""
    for name in ("GITHUB_OUTPUT", "GITHUB_STEP_SUMMARY", "GITHUB_STATE"):
        monkeypatch.delenv(name, raising=False)


def test_create_runner() -> None:
    """The runner matches the framework."""
    inputs = ActionInputs()

    pest = create_runner("pest", TestConfig(inputs, "pest"), inputs)
    phpunit = create_runner("phpunit", TestConfig(inputs, "phpunit"), inputs)

    assert isinstance(pest, PestRunner)
    assert isinstance(phpunit, PHPUnitRunner)


@pytest.mark.parametrize(
    ("inputs", "result", "threshold_message", "expected"),
    [
        (
            ActionInputs(),
            make_result(status="failure", passed=2, failed=3),
            "Coverage threshold not met: 50.00% < 80%",
            "Tests failed: 3 failure(s), 2 passed",
        ),
        (
            ActionInputs(fail_on_skipped=True, fail_on_incomplete=True),
            make_result(passed=3, skipped=1, incomplete=1),
            None,
            "Tests skipped: 1 test(s) were skipped",
        ),
        (
            ActionInputs(fail_on_incomplete=True),
            make_result(passed=4, incomplete=1),
            None,
            "Tests incomplete: 1 test(s) were incomplete",
        ),
        (
            ActionInputs(fail_on_risky=True),
            make_result(risky=2),
            None,
            "Tests risky: 2 test(s) were risky",
        ),
        (
            ActionInputs(),
            make_result(),
            "Coverage threshold not met: 50.00% < 80%",
            "Coverage threshold not met: 50.00% < 80%",
        ),
    ],
)
def test_decide_failures(
    inputs: ActionInputs,
    result: TestResult,
    threshold_message: str | None,
    expected: str,
) -> None:
    """The dominant cause names the failure."""
    outcome = TestPipeline(inputs).decide(result, None, threshold_message)

    assert outcome.success is False
    assert outcome.message == expected


def test_decide_ignores_counts_without_toggles() -> None:
    """Skipped, incomplete and risky tests pass unless configured."""
    result = make_result(passed=2, skipped=1, incomplete=1, risky=1, total=4)

    outcome = TestPipeline(ActionInputs()).decide(result, None, None)

    assert outcome.success is True
    assert outcome.message == "All tests passed! (2/4)"


async def test_run_success_with_coverage(project: Path) -> None:
    """A passing run with coverage above the threshold succeeds."""
    output = project / ".coverage"
    output.mkdir()
    (output / "clover.xml").write_text(CLOVER)
    inputs = ActionInputs(
        working_directory=project,
        cache=CacheSettings(enabled=False),
        coverage=CoverageSettings(enabled=True, output=output, threshold=80),
    )

    with (
        patch(f"{MODULE}.install_dependencies", AsyncMock(return_value=True)),
        patch(f"{MODULE}.check_php_extensions", AsyncMock(return_value=[])),
        patch.object(
            PHPUnitRunner, "run", AsyncMock(return_value=make_result())
        ) as mock_run,
        patch(f"{MODULE}.GitHubReporter") as mock_reporter,
    ):
        mock_reporter.return_value.report = AsyncMock()
        outcome = await TestPipeline(inputs).run()

    mock_run.assert_awaited_once()
    assert outcome.success is True
    assert outcome.message == "All tests passed! (5/5)"
    assert outcome.coverage is not None
    assert outcome.coverage.summary.overall == pytest.approx(85.0)
    mock_reporter.return_value.report.assert_awaited_once_with(
        outcome.result, outcome.coverage
    )


async def test_run_fails_below_metric_threshold(project: Path) -> None:
    """An unmet per-metric threshold fails an otherwise passing run."""
    output = project / ".coverage"
    output.mkdir()
    (output / "clover.xml").write_text(CLOVER)
    inputs = ActionInputs(
        working_directory=project,
        cache=CacheSettings(enabled=False),
        coverage=CoverageSettings(
            enabled=True,
            output=output,
            metric_thresholds=MetricThresholds(lines=90),
        ),
    )

    with (
        patch(f"{MODULE}.install_dependencies", AsyncMock(return_value=True)),
        patch(f"{MODULE}.check_php_extensions", AsyncMock(return_value=[])),
        patch.object(PHPUnitRunner, "run", AsyncMock(return_value=make_result())),
        patch(f"{MODULE}.GitHubReporter") as mock_reporter,
    ):
        mock_reporter.return_value.report = AsyncMock()
        outcome = await TestPipeline(inputs).run()

    assert outcome.success is False
    assert outcome.message == "Line coverage threshold not met: 80.00% < 90%"


async def test_run_sets_up_database_for_functional_tests(project: Path) -> None:
    """The database is provisioned before functional tests."""
    inputs = ActionInputs(
        working_directory=project,
        test_type="functional",
        cache=CacheSettings(enabled=False),
        database=DatabaseSettings(type="sqlite"),
    )

    with (
        patch(f"{MODULE}.install_dependencies", AsyncMock(return_value=True)),
        patch(f"{MODULE}.check_php_extensions", AsyncMock(return_value=[])),
        patch.object(PHPUnitRunner, "run", AsyncMock(return_value=make_result())),
        patch(f"{MODULE}.GitHubReporter") as mock_reporter,
        patch(f"{MODULE}.DatabaseSetup") as mock_setup,
    ):
        mock_reporter.return_value.report = AsyncMock()
        mock_setup.return_value.setup = AsyncMock(return_value=True)
        await TestPipeline(inputs).run()

    config, project_type = mock_setup.call_args.args
    assert config.is_sqlite()
    assert project_type == "generic"


async def test_run_skips_database_for_unit_tests(project: Path) -> None:
    """Unit test runs do not provision a database."""
    inputs = ActionInputs(
        working_directory=project,
        test_type="unit",
        cache=CacheSettings(enabled=False),
        database=DatabaseSettings(type="sqlite"),
    )

    with (
        patch(f"{MODULE}.install_dependencies", AsyncMock(return_value=True)),
        patch(f"{MODULE}.check_php_extensions", AsyncMock(return_value=[])),
        patch.object(PHPUnitRunner, "run", AsyncMock(return_value=make_result())),
        patch(f"{MODULE}.GitHubReporter") as mock_reporter,
        patch(f"{MODULE}.DatabaseSetup") as mock_setup,
    ):
        mock_reporter.return_value.report = AsyncMock()
        await TestPipeline(inputs).run()

    mock_setup.assert_not_called()


async def test_run_without_composer_json(tmp_path: Path) -> None:
    """A project without composer.json aborts the run."""
    inputs = ActionInputs(
        working_directory=tmp_path, cache=CacheSettings(enabled=False)
    )

    with pytest.raises(ComposerManifestNotFoundError):
        await TestPipeline(inputs).run()
