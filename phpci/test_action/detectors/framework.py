"""Detect which PHP test framework to run."""

import logging

from phpci.test_action.detectors.composer import ComposerAnalyzer
from phpci.test_action.models.action_inputs import FrameworkChoice, TestFramework

logger = logging.getLogger(__name__)


class FrameworkDetector:
    """Choose between PHPUnit and Pest."""

    def __init__(self, composer: ComposerAnalyzer, requested: FrameworkChoice) -> None:
        """Initialize detector with the configured framework choice."""
        self.composer = composer
        self.requested = requested

    def detect(self) -> TestFramework:
        """Return the explicit choice, or auto-detect from the project."""
        if self.requested != "auto":
            logger.info(f"Using explicitly configured framework: {self.requested}")
            return self.requested

        framework = self._auto_detect()
        logger.info(f"Auto-detected framework: {framework}")
        return framework

    def _auto_detect(self) -> TestFramework:
        if self.composer.has_dependency("pestphp/pest"):
            logger.debug("Found pestphp/pest in composer.json")
            return "pest"

        if self.composer.has_vendor_bin("pest"):
            logger.debug("Found pest executable in vendor/bin")
            return "pest"

        if self.composer.has_dependency("phpunit/phpunit"):
            logger.debug("Found phpunit/phpunit in composer.json")
            return "phpunit"

        if self.composer.has_vendor_bin("phpunit"):
            logger.debug("Found phpunit executable in vendor/bin")
            return "phpunit"

        logger.warning("No test framework detected, defaulting to PHPUnit")
        return "phpunit"
