"""Build ActionInputs from raw action input strings.

Action inputs always arrive as strings (GitHub passes them as
``INPUT_<NAME>`` environment variables); this module applies the
parsing rules for booleans, numbers, lists and paths.
"""

import logging
from collections.abc import Mapping
from pathlib import Path

from phpci.test_action.models.action_inputs import (
    ActionInputs,
    CacheSettings,
    CodecovSettings,
    CoverageSettings,
    DatabaseSettings,
)
from phpci.test_action.models.coverage import MetricThresholds

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("true", "1", "yes")


def parse_bool(value: str) -> bool:
    """Interpret ``true``, ``1`` and ``yes`` (any case) as True."""
    return value.strip().lower() in _TRUE_VALUES


def parse_int(value: str, default: int = 0) -> int:
    """Parse an integer, falling back to *default* when blank or invalid."""
    try:
        return int(value.strip())
    except ValueError:
        return default


def parse_float(value: str, default: float = 0.0) -> float:
    """Parse a float, falling back to *default* when blank or invalid."""
    try:
        return float(value.strip())
    except ValueError:
        return default


def parse_optional_float(value: str) -> float | None:
    """Parse a float, or None when the input is blank or invalid."""
    try:
        return float(value.strip())
    except ValueError:
        return None


def parse_list(value: str) -> list[str]:
    """Split a comma-separated input, dropping blank entries."""
    return [item.strip() for item in value.split(",") if item.strip()]


def resolve_config_path(working_dir: Path, value: str) -> Path | None:
    """Resolve the PHPUnit config path; a missing file means no config."""
    if not value.strip():
        return None

    path = (working_dir / value.strip()).resolve()
    if not path.is_file():
        logger.info(f"PHPUnit configuration {path} not found, running without it")
        return None
    return path


def build_inputs(raw: Mapping[str, str], cwd: Path | None = None) -> ActionInputs:
    """Convert raw input strings, keyed by input name, into ActionInputs.

    Raises:
        pydantic.ValidationError: If an input has an unsupported value

    """

    def get(name: str, default: str = "") -> str:
        return raw.get(name) or default

    working_dir = ((cwd or Path.cwd()) / get("working-directory", ".")).resolve()

    return ActionInputs(
        test_type=get("test-type", "all"),
        test_framework=get("test-framework", "auto"),
        test_path=(working_dir / get("test-path", "tests")).resolve(),
        phpunit_config=resolve_config_path(working_dir, get("phpunit-config")),
        composer_args=get("composer-args"),
        working_directory=working_dir,
        cache=CacheSettings(
            enabled=parse_bool(get("cache-enabled", "true")),
            key_prefix=get("cache-key-prefix", "php-test"),
            composer_cache=parse_bool(get("cache-composer-cache", "true")),
            vendor=parse_bool(get("cache-vendor", "false")),
        ),
        coverage=CoverageSettings(
            enabled=parse_bool(get("coverage-enabled", "false")),
            format=get("coverage-format", "clover"),
            output=(working_dir / get("coverage-output", ".coverage")).resolve(),
            threshold=parse_float(get("coverage-threshold", "0")),
            metric_thresholds=MetricThresholds(
                lines=parse_optional_float(get("coverage-threshold-lines")),
                methods=parse_optional_float(get("coverage-threshold-methods")),
                classes=parse_optional_float(get("coverage-threshold-classes")),
            ),
            comment=parse_bool(get("coverage-comment", "false")),
        ),
        codecov=CodecovSettings(
            upload=parse_bool(get("codecov-upload", "false")),
            token=get("codecov-token"),
        ),
        database=DatabaseSettings(
            type=get("database-type", "none"),
            host=get("database-host", "127.0.0.1"),
            port=parse_int(get("database-port", "3306")),
            name=get("database-name", "testing"),
            user=get("database-user", "root"),
            password=get("database-password"),
        ),
        php_extensions=parse_list(get("php-extensions")),
        fail_on_incomplete=parse_bool(get("fail-on-incomplete", "false")),
        fail_on_risky=parse_bool(get("fail-on-risky", "false")),
        fail_on_skipped=parse_bool(get("fail-on-skipped", "false")),
        verbose=parse_bool(get("verbose", "false")),
        github_token=get("github-token"),
    )
