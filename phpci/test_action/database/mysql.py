"""Provision a MySQL database through the mysql client."""

import logging

from phpci.test_action.database.config import DatabaseConfig
from phpci.test_action.errors import ExternalToolError
from phpci.test_action.process import CommandResult, run_command

logger = logging.getLogger(__name__)


async def setup_mysql(config: DatabaseConfig) -> None:
    """Check the server is reachable and create the database.

    Raises:
        ExternalToolError: If the server cannot be reached

    """
    name = config.settings.name
    logger.info(f"Setting up MySQL database: {name}")

    if not await check_connection(config):
        raise ExternalToolError(
            "Failed to connect to MySQL. Ensure MySQL service container is "
            "running and accessible."
        )

    await create_database(config)
    logger.info("MySQL database setup completed")


async def check_connection(config: DatabaseConfig) -> bool:
    """Return True if ``SELECT 1`` succeeds."""
    logger.debug("Testing MySQL connection...")
    try:
        result = await _mysql(config, "SELECT 1;")
    except OSError as e:
        logger.warning(f"MySQL connection error: {e}")
        return False

    if result.exit_code != 0:
        logger.warning(f"MySQL connection failed: {result.stderr}")
        return False

    logger.debug("MySQL connection successful")
    return True


async def create_database(config: DatabaseConfig) -> None:
    """Create the configured database if it does not exist."""
    name = config.settings.name
    logger.debug(f"Creating database: {name}")
    try:
        result = await _mysql(config, f"CREATE DATABASE IF NOT EXISTS `{name}`;")
    except OSError as e:
        logger.warning(f"Database creation error: {e}")
        return

    if result.exit_code != 0:
        logger.warning(f"Failed to create database: {result.stderr}")
    else:
        logger.debug(f"Database created: {name}")


async def _mysql(config: DatabaseConfig, statement: str) -> CommandResult:
    s = config.settings
    return await run_command(
        "mysql",
        [f"-h{s.host}", f"-P{s.port}", f"-u{s.user}", f"-p{s.password}", "-e", statement],
    )
