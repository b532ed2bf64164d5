"""Check that requested PHP extensions are loaded."""

import logging

from phpci.test_action.process import run_command

logger = logging.getLogger(__name__)


async def check_php_extensions(required: list[str]) -> list[str]:
    """Warn about requested extensions that PHP does not report as loaded.

    Args:
        required: Extension names, e.g. ["mbstring", "pdo_mysql"]

    Returns:
        The requested extensions that are missing

    """
    if not required:
        return []

    try:
        result = await run_command("php", ["-m"])
    except OSError as e:
        logger.warning(f"Cannot list PHP extensions: {e}")
        return []

    if result.exit_code != 0:
        logger.warning(f"Cannot list PHP extensions: {result.stderr}")
        return []

    loaded = {line.strip().lower() for line in result.stdout.splitlines()}
    missing = [ext for ext in required if ext.lower() not in loaded]

    for extension in missing:
        logger.warning(f"PHP extension not loaded: {extension}")
    if not missing:
        logger.info(f"All requested PHP extensions loaded: {', '.join(required)}")

    return missing
