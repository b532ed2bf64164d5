"""Compare aggregated coverage against configured thresholds."""

import logging

from phpci.test_action.models.coverage import (
    CoverageData,
    MetricThresholdResult,
    MetricThresholds,
    ThresholdResult,
)

logger = logging.getLogger(__name__)

_METRIC_LABELS = {
    "lines": "Line",
    "methods": "Method",
    "classes": "Class",
}


def evaluate_overall(coverage: CoverageData, threshold: float) -> ThresholdResult:
    """Check overall coverage against *threshold*.

    A threshold of 0 means no threshold is configured and always passes.
    The comparison is inclusive: coverage equal to the threshold passes.
    """
    actual = coverage.summary.overall

    if threshold == 0:
        logger.debug("Coverage threshold validation skipped (threshold: 0)")
        return ThresholdResult(
            met=True,
            required=threshold,
            actual=actual,
            message="No coverage threshold set",
        )

    return _evaluate("Coverage", actual, threshold)


def evaluate_per_metric(
    coverage: CoverageData, thresholds: MetricThresholds
) -> MetricThresholdResult:
    """Check each category that has a threshold; the rest are ignored."""
    results: dict[str, ThresholdResult] = {}

    for metric, label in _METRIC_LABELS.items():
        required = getattr(thresholds, metric)
        if required is None:
            continue
        actual = getattr(coverage.summary, metric).percentage
        results[metric] = _evaluate(f"{label} coverage", actual, required)

    return MetricThresholdResult(
        met=all(result.met for result in results.values()),
        results=results,
    )


def _evaluate(subject: str, actual: float, required: float) -> ThresholdResult:
    met = actual >= required
    if met:
        message = f"{subject} threshold met: {actual:.2f}% >= {required:g}%"
        logger.info(message)
    else:
        message = f"{subject} threshold not met: {actual:.2f}% < {required:g}%"
        logger.error(message)

    return ThresholdResult(met=met, required=required, actual=actual, message=message)
