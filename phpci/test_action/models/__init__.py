"""Data models for action inputs, test results and coverage."""

from phpci.test_action.models.action_inputs import (
    ActionInputs,
    CacheSettings,
    CodecovSettings,
    CoverageSettings,
    DatabaseSettings,
)
from phpci.test_action.models.coverage import (
    CoverageData,
    CoverageMetric,
    CoverageSummary,
    FileCoverage,
    MetricThresholdResult,
    MetricThresholds,
    ThresholdResult,
)
from phpci.test_action.models.test_result import TestFailure, TestResult

__all__ = [
    "ActionInputs",
    "CacheSettings",
    "CodecovSettings",
    "CoverageData",
    "CoverageMetric",
    "CoverageSettings",
    "CoverageSummary",
    "DatabaseSettings",
    "FileCoverage",
    "MetricThresholdResult",
    "MetricThresholds",
    "TestFailure",
    "TestResult",
    "ThresholdResult",
]
