"""Tests for coverage threshold evaluation."""

import logging

import pytest

from phpci.test_action.coverage.threshold import evaluate_overall, evaluate_per_metric
from phpci.test_action.models.coverage import (
    CoverageData,
    CoverageMetric,
    CoverageSummary,
    MetricThresholds,
)


@pytest.fixture
def coverage() -> CoverageData:
    """Coverage with 80% lines, 75% methods, 100% classes."""
    return CoverageData(
        summary=CoverageSummary(
            lines=CoverageMetric.from_counts(80, 100),
            methods=CoverageMetric.from_counts(3, 4),
            classes=CoverageMetric.from_counts(2, 2),
            overall=85.0,
        )
    )


def test_threshold_met(coverage: CoverageData) -> None:
    """Coverage above the threshold passes."""
    result = evaluate_overall(coverage, 80)

    assert result.met is True
    assert result.actual == 85.0
    assert result.required == 80
    assert result.message == "Coverage threshold met: 85.00% >= 80%"


def test_threshold_equal_is_met(coverage: CoverageData) -> None:
    """The comparison is inclusive."""
    assert evaluate_overall(coverage, 85).met is True


def test_threshold_not_met(coverage: CoverageData) -> None:
    """Coverage below the threshold fails."""
    result = evaluate_overall(coverage, 90)

    assert result.met is False
    assert result.message == "Coverage threshold not met: 85.00% < 90%"


def test_threshold_zero_disables_check(coverage: CoverageData) -> None:
    """A threshold of 0 always passes."""
    result = evaluate_overall(coverage, 0)

    assert result.met is True
    assert result.message == "No coverage threshold set"


def test_fractional_threshold(coverage: CoverageData) -> None:
    """Fractional thresholds are supported."""
    result = evaluate_overall(coverage, 85.5)

    assert result.met is False
    assert "< 85.5%" in result.message


def test_per_metric_only_configured(coverage: CoverageData) -> None:
    """Only categories with a threshold are evaluated."""
    result = evaluate_per_metric(coverage, MetricThresholds(lines=80))

    assert result.met is True
    assert list(result.results) == ["lines"]
    assert result.results["lines"].message == (
        "Line coverage threshold met: 80.00% >= 80%"
    )


def test_per_metric_any_failure_fails(coverage: CoverageData) -> None:
    """One unmet category fails the combined verdict."""
    result = evaluate_per_metric(
        coverage, MetricThresholds(lines=70, methods=80, classes=100)
    )

    assert result.met is False
    assert result.results["lines"].met is True
    assert result.results["methods"].met is False
    assert result.results["classes"].met is True
    assert result.results["methods"].message == (
        "Method coverage threshold not met: 75.00% < 80%"
    )


def test_per_metric_empty(coverage: CoverageData) -> None:
    """No thresholds means nothing to fail."""
    result = evaluate_per_metric(coverage, MetricThresholds())

    assert result.met is True
    assert result.results == {}


THRESHOLD_LOGGER = "phpci.test_action.coverage.threshold"


def threshold_records(
    caplog: pytest.LogCaptureFixture,
) -> list[tuple[int, str]]:
    """Level and message of records from the threshold logger."""
    return [
        (record.levelno, record.getMessage())
        for record in caplog.records
        if record.name == THRESHOLD_LOGGER
    ]


def test_met_threshold_logged_at_info(
    coverage: CoverageData, caplog: pytest.LogCaptureFixture
) -> None:
    """A met threshold is logged at INFO."""
    caplog.set_level(logging.DEBUG, logger=THRESHOLD_LOGGER)

    evaluate_overall(coverage, 80)

    assert threshold_records(caplog) == [
        (logging.INFO, "Coverage threshold met: 85.00% >= 80%")
    ]


def test_unmet_threshold_logged_at_error(
    coverage: CoverageData, caplog: pytest.LogCaptureFixture
) -> None:
    """An unmet threshold is logged at ERROR."""
    caplog.set_level(logging.DEBUG, logger=THRESHOLD_LOGGER)

    evaluate_overall(coverage, 90)

    assert threshold_records(caplog) == [
        (logging.ERROR, "Coverage threshold not met: 85.00% < 90%")
    ]


def test_zero_threshold_logged_at_debug(
    coverage: CoverageData, caplog: pytest.LogCaptureFixture
) -> None:
    """Skipping the check is only logged at DEBUG."""
    caplog.set_level(logging.DEBUG, logger=THRESHOLD_LOGGER)

    evaluate_overall(coverage, 0)

    assert [level for level, _ in threshold_records(caplog)] == [logging.DEBUG]


def test_per_metric_logs_each_evaluated_metric(
    coverage: CoverageData, caplog: pytest.LogCaptureFixture
) -> None:
    """Each configured metric logs one verdict; omitted metrics log nothing."""
    caplog.set_level(logging.DEBUG, logger=THRESHOLD_LOGGER)

    evaluate_per_metric(coverage, MetricThresholds(lines=70, methods=80))

    assert threshold_records(caplog) == [
        (logging.INFO, "Line coverage threshold met: 80.00% >= 70%"),
        (logging.ERROR, "Method coverage threshold not met: 75.00% < 80%"),
    ]
