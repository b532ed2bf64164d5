"""Install the project's Composer dependencies."""

import logging
import shlex
from pathlib import Path

from phpci.test_action.errors import ExternalToolError
from phpci.test_action.process import run_command

logger = logging.getLogger(__name__)


async def install_dependencies(working_dir: Path, composer_args: str = "") -> bool:
    """Run ``composer install``; failures are logged and reported as False."""
    try:
        args = [
            "install",
            "--no-interaction",
            "--no-progress",
            *shlex.split(composer_args),
        ]
        result = await run_command("composer", args, cwd=working_dir)
        if result.exit_code != 0:
            raise ExternalToolError(
                f"composer install exited with code {result.exit_code}: "
                f"{result.stderr}"
            )
    except (OSError, ValueError, ExternalToolError) as e:
        logger.warning(f"Failed to install Composer dependencies: {e}")
        return False

    logger.info("Composer dependencies installed")
    return True
