"""CLI entry point for the PHP test action."""

import asyncio
import logging
import sys
from typing import Any

import typer
from pydantic import ValidationError

from phpci.test_action.cache.github import GitHubCacheBackend
from phpci.test_action.errors import PipelineFatalError
from phpci.test_action.inputs import build_inputs
from phpci.test_action.models.github_config import GitHubCacheConfig
from phpci.test_action.orchestrator import TestPipeline
from phpci.test_action.workflow import set_failed

# Configure logging - force reconfiguration
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
    force=True,
)
logger = logging.getLogger(__name__)

app = typer.Typer()


def _input(name: str, default: str, help_text: str, *envvars: str) -> Any:
    """Option readable as ``--name`` or from the GitHub ``INPUT_NAME`` variable."""
    return typer.Option(
        default,
        f"--{name}",
        envvar=[f"INPUT_{name.upper()}", *envvars],
        help=help_text,
        show_default=bool(default),
    )


@app.command()
def main(  # noqa: PLR0913
    test_type: str = _input("test-type", "all", "unit, functional or all"),
    test_framework: str = _input("test-framework", "auto", "auto, phpunit or pest"),
    test_path: str = _input("test-path", "tests", "Directory containing tests"),
    phpunit_config: str = _input(
        "phpunit-config", "phpunit.xml", "PHPUnit configuration file"
    ),
    composer_args: str = _input("composer-args", "", "Extra composer install args"),
    working_directory: str = _input("working-directory", ".", "Project directory"),
    cache_enabled: str = _input("cache-enabled", "true", "Cache dependencies"),
    cache_key_prefix: str = _input("cache-key-prefix", "php-test", "Cache key prefix"),
    cache_composer_cache: str = _input(
        "cache-composer-cache", "true", "Cache the Composer download cache"
    ),
    cache_vendor: str = _input("cache-vendor", "false", "Cache the vendor directory"),
    coverage_enabled: str = _input("coverage-enabled", "false", "Collect coverage"),
    coverage_format: str = _input("coverage-format", "clover", "clover, html or both"),
    coverage_output: str = _input(
        "coverage-output", ".coverage", "Coverage report directory"
    ),
    coverage_threshold: str = _input(
        "coverage-threshold", "0", "Minimum overall coverage, 0 to disable"
    ),
    coverage_threshold_lines: str = _input(
        "coverage-threshold-lines", "", "Minimum line coverage"
    ),
    coverage_threshold_methods: str = _input(
        "coverage-threshold-methods", "", "Minimum method coverage"
    ),
    coverage_threshold_classes: str = _input(
        "coverage-threshold-classes", "", "Minimum class coverage"
    ),
    coverage_comment: str = _input(
        "coverage-comment", "false", "Comment coverage on pull requests"
    ),
    codecov_upload: str = _input("codecov-upload", "false", "Upload to Codecov"),
    codecov_token: str = _input("codecov-token", "", "Codecov upload token"),
    database_type: str = _input("database-type", "none", "sqlite, mysql or none"),
    database_host: str = _input("database-host", "127.0.0.1", "MySQL host"),
    database_port: str = _input("database-port", "3306", "MySQL port"),
    database_name: str = _input("database-name", "testing", "Database name"),
    database_user: str = _input("database-user", "root", "Database user"),
    database_password: str = _input("database-password", "", "Database password"),
    php_extensions: str = _input(
        "php-extensions", "", "Comma-separated PHP extensions to check"
    ),
    fail_on_incomplete: str = _input(
        "fail-on-incomplete", "false", "Fail on incomplete tests"
    ),
    fail_on_risky: str = _input("fail-on-risky", "false", "Fail on risky tests"),
    fail_on_skipped: str = _input("fail-on-skipped", "false", "Fail on skipped tests"),
    verbose: str = _input("verbose", "false", "Verbose output"),
    github_token: str = _input(
        "github-token", "", "Token used for PR comments", "GITHUB_TOKEN"
    ),
) -> None:
    """Run a PHP project's tests and report the results to GitHub."""
    params = dict(locals())
    raw = {name.replace("_", "-"): value for name, value in params.items()}

    try:
        inputs = build_inputs(raw)
    except ValidationError as e:
        logger.error(f"Invalid action inputs: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if inputs.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    cache_config = GitHubCacheConfig.from_env()
    backend = GitHubCacheBackend(cache_config) if cache_config else None
    pipeline = TestPipeline(inputs, backend)

    try:
        outcome = asyncio.run(pipeline.run())
    except PipelineFatalError as e:
        logger.error(f"Action failed: {e}")
        set_failed(f"Action failed: {e}")
        raise typer.Exit(code=1)
    except Exception as e:
        logger.exception("Action failed")
        set_failed(f"Action failed: {e}")
        raise typer.Exit(code=1)

    if not outcome.success:
        set_failed(outcome.message)
        raise typer.Exit(code=1)


if __name__ == "__main__":  # pragma: no cover
    app()
