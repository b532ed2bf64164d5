"""Aggregate Clover XML coverage reports."""

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from phpci.test_action.errors import MalformedDocumentError
from phpci.test_action.models.coverage import (
    CoverageData,
    CoverageMetric,
    CoverageSummary,
    FileCoverage,
)
from phpci.test_action.xml_decoder import (
    ParsedNode,
    attributes,
    child,
    children,
    decode,
)

logger = logging.getLogger(__name__)


class CloverMetrics(BaseModel):
    """Counts carried by a Clover ``<metrics>`` element."""

    model_config = ConfigDict(extra="ignore")

    statements: int = 0
    coveredstatements: int = 0
    methods: int = 0
    coveredmethods: int = 0
    classes: int = 0
    coveredclasses: int = 0


class CloverLine(BaseModel):
    """A Clover ``<line>`` element."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    num: int = 0
    type: str = ""
    count: int = 0


def parse_coverage_file(clover_path: Path) -> CoverageData | None:
    """Parse a Clover report from disk.

    Args:
        clover_path: Path to the Clover XML file

    Returns:
        Aggregated coverage, or None if the file is missing or unusable

    """
    if not clover_path.exists():
        logger.warning(f"Coverage file not found: {clover_path}")
        return None

    try:
        document = decode(clover_path.read_bytes())
        coverage = aggregate_coverage(document)
    except (OSError, MalformedDocumentError, ValidationError) as e:
        logger.warning(f"Failed to parse coverage report {clover_path}: {e}")
        return None

    logger.info(f"Coverage parsed: {coverage.summary.overall:.2f}%")
    return coverage


def aggregate_coverage(document: ParsedNode) -> CoverageData:
    """Build coverage figures from a decoded Clover document.

    Raises:
        MalformedDocumentError: If there is no ``coverage > project`` element

    """
    project = child(child(document, "coverage"), "project")
    if not isinstance(project, dict):
        raise MalformedDocumentError("Invalid Clover XML format: no project element")

    files: dict[str, FileCoverage] = {}
    for file_node in _iter_file_nodes(project):
        metrics_node = child(file_node, "metrics")
        if metrics_node is None:
            continue

        path = str(attributes(file_node).get("name", ""))
        metrics = CloverMetrics.model_validate(attributes(metrics_node))
        files[path] = FileCoverage(
            path=path,
            lines=CoverageMetric.from_counts(
                metrics.coveredstatements, metrics.statements
            ),
            methods=CoverageMetric.from_counts(
                metrics.coveredmethods, metrics.methods
            ),
            classes=CoverageMetric.from_counts(
                metrics.coveredclasses, metrics.classes
            ),
            uncovered_lines=tuple(_uncovered_lines(file_node)),
        )

    project_metrics = CloverMetrics.model_validate(
        attributes(child(project, "metrics"))
    )
    lines = CoverageMetric.from_counts(
        project_metrics.coveredstatements, project_metrics.statements
    )
    methods = CoverageMetric.from_counts(
        project_metrics.coveredmethods, project_metrics.methods
    )
    classes = CoverageMetric.from_counts(
        project_metrics.coveredclasses, project_metrics.classes
    )
    # Averaged from the already rounded percentages.
    overall = (lines.percentage + methods.percentage + classes.percentage) / 3

    return CoverageData(
        summary=CoverageSummary(
            lines=lines, methods=methods, classes=classes, overall=overall
        ),
        files=files,
    )


def _iter_file_nodes(project: ParsedNode) -> Iterator[Any]:
    """Yield file elements directly under the project, then under packages."""
    yield from children(project, "file")
    for package in children(project, "package"):
        yield from children(package, "file")


def _uncovered_lines(file_node: Any) -> Iterator[int]:
    for line_node in children(file_node, "line"):
        line = CloverLine.model_validate(attributes(line_node))
        if line.type == "stmt" and line.count == 0:
            yield line.num
