"""Configuration models for the action inputs."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from phpci.test_action.models.coverage import MetricThresholds

TestType = Literal["unit", "functional", "all"]
FrameworkChoice = Literal["auto", "phpunit", "pest"]
TestFramework = Literal["phpunit", "pest"]
ProjectType = Literal["typo3", "laravel", "generic"]
DatabaseType = Literal["sqlite", "mysql", "none"]
CoverageFormat = Literal["clover", "html", "both"]


class CacheSettings(BaseModel):
    """Dependency cache configuration."""

    enabled: bool = Field(default=True, description="Restore and save the cache")
    key_prefix: str = Field(default="php-test", description="Cache key prefix")
    composer_cache: bool = Field(
        default=True, description="Cache the Composer download cache directory"
    )
    vendor: bool = Field(default=False, description="Cache the vendor directory")


class CoverageSettings(BaseModel):
    """Code coverage configuration."""

    enabled: bool = Field(default=False, description="Collect code coverage")
    format: CoverageFormat = Field(default="clover", description="Report format")
    output: Path = Field(
        default=Path(".coverage"), description="Directory for coverage reports"
    )
    threshold: float = Field(
        default=0.0, ge=0, le=100, description="Minimum overall coverage, 0=off"
    )
    metric_thresholds: MetricThresholds = Field(default_factory=MetricThresholds)
    comment: bool = Field(default=False, description="Post a PR comment")

    @property
    def clover_path(self) -> Path:
        """Location of the Clover report."""
        return self.output / "clover.xml"

    @property
    def junit_path(self) -> Path:
        """Location of the JUnit log."""
        return self.output / "junit.xml"


class CodecovSettings(BaseModel):
    """Codecov upload configuration."""

    upload: bool = Field(default=False, description="Upload coverage to Codecov")
    token: str = Field(default="", description="Codecov upload token")


class DatabaseSettings(BaseModel):
    """Test database configuration."""

    type: DatabaseType = Field(default="none", description="Database engine")
    host: str = Field(default="127.0.0.1", description="MySQL host")
    port: int = Field(default=3306, description="MySQL port")
    name: str = Field(default="testing", description="Database name")
    user: str = Field(default="root", description="Database user")
    password: str = Field(default="", description="Database password")


class ActionInputs(BaseModel):
    """Complete, resolved action configuration."""

    test_type: TestType = Field(default="all", description="Test suite to run")
    test_framework: FrameworkChoice = Field(
        default="auto", description="Test framework, or auto-detect"
    )
    test_path: Path = Field(default=Path("tests"), description="Tests directory")
    phpunit_config: Path | None = Field(
        default=None, description="PHPUnit configuration file"
    )
    composer_args: str = Field(default="", description="Extra composer arguments")
    working_directory: Path = Field(
        default=Path("."), description="Project directory"
    )
    cache: CacheSettings = Field(default_factory=CacheSettings)
    coverage: CoverageSettings = Field(default_factory=CoverageSettings)
    codecov: CodecovSettings = Field(default_factory=CodecovSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    php_extensions: list[str] = Field(
        default_factory=list, description="PHP extensions expected to be loaded"
    )
    fail_on_incomplete: bool = False
    fail_on_risky: bool = False
    fail_on_skipped: bool = False
    verbose: bool = False
    github_token: str = Field(default="", description="Token for PR comments")
