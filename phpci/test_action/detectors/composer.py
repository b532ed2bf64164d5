"""Read the project's composer.json."""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from phpci.test_action.errors import ComposerManifestNotFoundError, PipelineFatalError

logger = logging.getLogger(__name__)


class ComposerManifest(BaseModel):
    """The parts of composer.json the action looks at."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str | None = None
    type: str | None = None
    require: dict[str, str] = Field(default_factory=dict)
    require_dev: dict[str, str] = Field(default_factory=dict, alias="require-dev")
    scripts: dict[str, Any] = Field(default_factory=dict)


def find_file_upwards(file_name: str, start_dir: Path) -> Path | None:
    """Return the first *file_name* found in *start_dir* or its parents."""
    for directory in (start_dir, *start_dir.parents):
        candidate = directory / file_name
        if candidate.is_file():
            return candidate
    return None


class ComposerAnalyzer:
    """Answers questions about the project's Composer manifest."""

    def __init__(self) -> None:
        """Initialize an analyzer with no manifest loaded."""
        self.composer_path: Path | None = None
        self.manifest: ComposerManifest | None = None

    def analyze(self, working_dir: Path) -> None:
        """Locate and load composer.json.

        Raises:
            ComposerManifestNotFoundError: If there is no composer.json
            PipelineFatalError: If composer.json cannot be read

        """
        logger.debug("Analyzing composer.json...")

        composer_path = find_file_upwards("composer.json", working_dir.resolve())
        if composer_path is None:
            raise ComposerManifestNotFoundError("composer.json not found in project")

        logger.info(f"Found composer.json at {composer_path}")

        try:
            data = json.loads(composer_path.read_text(encoding="utf-8"))
            self.manifest = ComposerManifest.model_validate(data)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise PipelineFatalError(f"Invalid composer.json at {composer_path}: {e}")

        self.composer_path = composer_path

    @property
    def project_dir(self) -> Path | None:
        """Directory containing composer.json."""
        return self.composer_path.parent if self.composer_path else None

    def has_dependency(self, package_name: str) -> bool:
        """Return True if *package_name* is in require or require-dev."""
        if self.manifest is None:
            return False
        return (
            package_name in self.manifest.require
            or package_name in self.manifest.require_dev
        )

    def dependencies(self) -> list[str]:
        """Return all required package names, runtime first."""
        if self.manifest is None:
            return []
        return [*self.manifest.require, *self.manifest.require_dev]

    def has_script(self, script_name: str) -> bool:
        """Return True if composer.json defines *script_name*."""
        return self.manifest is not None and script_name in self.manifest.scripts

    def project_type(self) -> str | None:
        """Return the composer package type."""
        return self.manifest.type if self.manifest else None

    def has_vendor_bin(self, bin_name: str) -> bool:
        """Return True if ``vendor/bin/<bin_name>`` exists."""
        if self.project_dir is None:
            return False
        return (self.project_dir / "vendor" / "bin" / bin_name).exists()
