"""Provision an empty SQLite database file."""

import logging

from phpci.test_action.database.config import DatabaseConfig

logger = logging.getLogger(__name__)


async def setup_sqlite(config: DatabaseConfig) -> None:
    """Create the SQLite file, replacing any database left from a previous run."""
    db_path = config.sqlite_path
    logger.info(f"Setting up SQLite database at {db_path}")

    db_path.parent.mkdir(parents=True, exist_ok=True)
    if db_path.exists():
        db_path.unlink()
        logger.debug(f"Cleaned up existing SQLite database: {db_path}")

    db_path.touch()
    logger.info("SQLite database setup completed")
