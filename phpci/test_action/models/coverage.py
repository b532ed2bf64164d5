"""Models for aggregated code coverage and threshold verdicts."""

import math

from pydantic import BaseModel, ConfigDict, Field, model_validator


def round_percentage(value: float) -> float:
    """Round to 2 decimals, halves rounding up."""
    return math.floor(value * 100 + 0.5) / 100


class CoverageMetric(BaseModel):
    """Covered/total counts for one coverage category."""

    model_config = ConfigDict(frozen=True)

    total: int = Field(..., ge=0, description="Number of coverable items")
    covered: int = Field(..., ge=0, description="Number of covered items")
    percentage: float = Field(..., description="Covered share, 2 decimals")

    @model_validator(mode="after")
    def _covered_within_total(self) -> "CoverageMetric":
        if self.covered > self.total:
            raise ValueError(
                f"covered ({self.covered}) exceeds total ({self.total})"
            )
        return self

    @classmethod
    def from_counts(cls, covered: int, total: int) -> "CoverageMetric":
        """Build a metric, yielding 0% when there is nothing to cover."""
        percentage = covered / total * 100 if total > 0 else 0.0
        return cls(
            total=total, covered=covered, percentage=round_percentage(percentage)
        )


class FileCoverage(BaseModel):
    """Coverage of a single source file."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Source file path as reported")
    lines: CoverageMetric
    methods: CoverageMetric
    classes: CoverageMetric
    uncovered_lines: tuple[int, ...] = Field(
        default=(), description="Statement lines never executed, in file order"
    )


class CoverageSummary(BaseModel):
    """Project-level coverage."""

    model_config = ConfigDict(frozen=True)

    lines: CoverageMetric
    methods: CoverageMetric
    classes: CoverageMetric
    overall: float = Field(
        ..., description="Unweighted mean of the three category percentages"
    )


class CoverageData(BaseModel):
    """Coverage parsed from one Clover report."""

    model_config = ConfigDict(frozen=True)

    summary: CoverageSummary
    files: dict[str, FileCoverage] = Field(default_factory=dict)


class ThresholdResult(BaseModel):
    """Verdict of comparing a coverage figure against a threshold."""

    model_config = ConfigDict(frozen=True)

    met: bool
    required: float
    actual: float
    message: str


class MetricThresholds(BaseModel):
    """Optional per-category thresholds; None means not evaluated."""

    lines: float | None = Field(default=None, ge=0, le=100)
    methods: float | None = Field(default=None, ge=0, le=100)
    classes: float | None = Field(default=None, ge=0, le=100)

    def is_empty(self) -> bool:
        """Return True when no category has a threshold."""
        return self.lines is None and self.methods is None and self.classes is None


class MetricThresholdResult(BaseModel):
    """Combined verdict of per-category threshold checks."""

    model_config = ConfigDict(frozen=True)

    met: bool
    results: dict[str, ThresholdResult] = Field(default_factory=dict)
