"""Aggregate JUnit XML test reports."""

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from phpci.test_action.errors import MalformedDocumentError
from phpci.test_action.models.test_result import TestFailure, TestResult
from phpci.test_action.process import CommandResult
from phpci.test_action.results.base import ResultParser
from phpci.test_action.xml_decoder import (
    ParsedNode,
    attributes,
    child,
    children,
    decode,
    text,
)

logger = logging.getLogger(__name__)

DEFAULT_FAILURE_MESSAGE = "Test failed"


class JUnitSuiteAttributes(BaseModel):
    """Counters carried by a ``<testsuite>`` element."""

    model_config = ConfigDict(extra="ignore")

    tests: int = 0
    failures: int = 0
    errors: int = 0
    skipped: int = 0
    incomplete: int = 0
    risky: int = 0
    time: float = 0.0


class JUnitCaseAttributes(BaseModel):
    """Identity of a ``<testcase>`` element."""

    model_config = ConfigDict(
        extra="ignore", coerce_numbers_to_str=True, populate_by_name=True
    )

    name: str = "Unknown"
    class_name: str | None = Field(default=None, alias="class")
    classname: str | None = None
    file: str = ""
    line: int = 0


class JUnitResultParser(ResultParser):
    """Read counts and failure details from a JUnit log file."""

    def __init__(self, framework: str, junit_path: Path) -> None:
        """Initialize parser for the JUnit file at *junit_path*."""
        super().__init__(framework)
        self.junit_path = junit_path

    def parse(self, run: CommandResult) -> TestResult:
        """Aggregate the JUnit file; the exit code is not consulted."""
        try:
            document = decode(self.junit_path.read_bytes())
        except OSError as e:
            raise MalformedDocumentError(
                f"Cannot read JUnit report {self.junit_path}: {e}"
            ) from e
        return aggregate_junit(document, self.framework, run.stdout)


def aggregate_junit(
    document: ParsedNode, framework: str, raw_output: str = ""
) -> TestResult:
    """Sum suite counters and collect failures from a decoded JUnit document.

    Failures and errors are both counted as failed. Risky tests are already
    counted as passed or failed and are only reported.

    Raises:
        MalformedDocumentError: If the document holds no test suites

    """
    if "testsuites" in document:
        suites = children(child(document, "testsuites"), "testsuite")
    elif "testsuite" in document:
        suites = children(document, "testsuite")
    else:
        raise MalformedDocumentError("Invalid JUnit XML format: no testsuites element")

    try:
        totals = [JUnitSuiteAttributes.model_validate(attributes(s)) for s in suites]
        failures = [
            failure
            for suite in suites
            for case in _iter_test_cases(suite)
            if (failure := _failure_from_case(case)) is not None
        ]
    except ValidationError as e:
        raise MalformedDocumentError(f"Invalid JUnit XML attributes: {e}") from e

    total = sum(t.tests for t in totals)
    failed = sum(t.failures + t.errors for t in totals)
    skipped = sum(t.skipped for t in totals)
    incomplete = sum(t.incomplete for t in totals)

    return TestResult(
        framework=framework,
        status="failure" if failed > 0 else "success",
        total=total,
        passed=total - failed - skipped - incomplete,
        failed=failed,
        skipped=skipped,
        incomplete=incomplete,
        risky=sum(t.risky for t in totals),
        failures=failures,
        execution_time=sum(t.time for t in totals),
        raw_output=raw_output,
    )


def _iter_test_cases(suite: Any) -> Iterator[Any]:
    """Yield test cases of *suite* and of its nested suites, depth first."""
    yield from children(suite, "testcase")
    for nested in children(suite, "testsuite"):
        yield from _iter_test_cases(nested)


def _failure_from_case(case: Any) -> TestFailure | None:
    failure_node = child(case, "failure")
    error_node = child(case, "error")
    if failure_node is None and error_node is None:
        return None

    node = failure_node if failure_node is not None else error_node
    identity = JUnitCaseAttributes.model_validate(attributes(case))
    trace = text(node)
    message = attributes(node).get("message")
    if message is None or message == "":
        message = trace or DEFAULT_FAILURE_MESSAGE

    return TestFailure(
        test_name=identity.name,
        test_class=identity.class_name or identity.classname,
        file=identity.file,
        line=identity.line,
        message=str(message),
        kind="error" if error_node is not None else "failure",
        trace=trace,
    )
