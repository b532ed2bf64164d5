"""Upload coverage reports to Codecov."""

import logging
from pathlib import Path

from phpci.test_action.process import run_command
from phpci.test_action.workflow import group

logger = logging.getLogger(__name__)


async def upload_coverage(coverage_path: Path, token: str = "") -> bool:
    """Upload *coverage_path* with the Codecov CLI; failures are warnings."""
    args = ["upload-process", "--file", str(coverage_path)]
    if token:
        args.extend(["--token", token])

    with group("Uploading coverage to Codecov"):
        try:
            result = await run_command("codecovcli", args)
        except OSError as e:
            logger.warning(f"Failed to upload to Codecov: {e}")
            return False

        if result.exit_code != 0:
            logger.warning(f"Codecov upload failed: {result.stderr}")
            return False

        logger.info("Coverage uploaded to Codecov successfully")
        return True
