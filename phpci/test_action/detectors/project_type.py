"""Detect the kind of PHP application under test."""

import logging

from phpci.test_action.detectors.composer import ComposerAnalyzer
from phpci.test_action.models.action_inputs import ProjectType

logger = logging.getLogger(__name__)

_TYPO3_DEPENDENCIES = ("typo3/testing-framework", "typo3/cms-core")
_TYPO3_PACKAGE_TYPES = ("typo3-cms-extension", "typo3-cms-framework")


class ProjectTypeDetector:
    """Tell TYPO3 extensions and Laravel apps from generic projects."""

    def __init__(self, composer: ComposerAnalyzer) -> None:
        """Initialize detector from an analyzed composer manifest."""
        self.composer = composer

    def detect(self) -> ProjectType:
        """Return the detected project type."""
        if self._is_typo3_extension():
            project_type: ProjectType = "typo3"
        elif self._is_laravel():
            project_type = "laravel"
        else:
            project_type = "generic"

        logger.info(f"Detected project type: {project_type}")
        return project_type

    def _has_project_file(self, name: str) -> bool:
        project_dir = self.composer.project_dir
        return project_dir is not None and (project_dir / name).exists()

    def _is_typo3_extension(self) -> bool:
        for dependency in _TYPO3_DEPENDENCIES:
            if self.composer.has_dependency(dependency):
                logger.debug(f"Found {dependency} dependency")
                return True

        if self._has_project_file("ext_emconf.php"):
            logger.debug("Found ext_emconf.php file")
            return True

        package_type = self.composer.project_type()
        if package_type in _TYPO3_PACKAGE_TYPES:
            logger.debug(f"Composer type is {package_type}")
            return True

        return False

    def _is_laravel(self) -> bool:
        if self.composer.has_dependency("laravel/framework"):
            logger.debug("Found laravel/framework dependency")
            return True

        if self._has_project_file("artisan"):
            logger.debug("Found artisan file")
            return True

        if self.composer.project_type() == "project" and self.composer.has_dependency(
            "laravel/laravel"
        ):
            logger.debug("Detected Laravel project type")
            return True

        return False
