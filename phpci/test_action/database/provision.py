"""Provision the test database and export its connection settings."""

import logging
import os

from phpci.test_action.database.config import DatabaseConfig
from phpci.test_action.database.mysql import setup_mysql
from phpci.test_action.database.sqlite import setup_sqlite
from phpci.test_action.errors import ExternalToolError
from phpci.test_action.models.action_inputs import ProjectType

logger = logging.getLogger(__name__)


class DatabaseSetup:
    """Prepares the configured database for the test process."""

    def __init__(self, config: DatabaseConfig, project_type: ProjectType) -> None:
        """Initialize setup for the given project type."""
        self.config = config
        self.project_type = project_type

    async def setup(self) -> bool:
        """Provision the database and set its environment variables.

        Returns:
            True if the database is ready, False if provisioning was skipped
            or failed

        """
        if not self.config.is_enabled():
            logger.info("Database setup skipped (database type: none)")
            return False

        try:
            if self.config.is_sqlite():
                await setup_sqlite(self.config)
            elif self.config.is_mysql():
                await setup_mysql(self.config)
        except (ExternalToolError, OSError) as e:
            logger.warning(f"Database setup failed, continuing without it: {e}")
            return False

        self.export_environment()
        logger.info("Database setup completed")
        return True

    def export_environment(self) -> dict[str, str]:
        """Set the project type's database variables for child processes."""
        env = self.config.environment_for(self.project_type)
        logger.debug(f"Setting {self.project_type} environment variables")

        for key, value in env.items():
            os.environ[key] = value
            logger.debug(f"Set {key}")

        return env
