"""Database connection settings and the environment they translate to."""

from pathlib import Path

from phpci.test_action.models.action_inputs import (
    DatabaseSettings,
    DatabaseType,
    ProjectType,
)

SQLITE_FILE_NAME = ".test-db.sqlite"


class DatabaseConfig:
    """Database settings bound to a working directory."""

    def __init__(self, settings: DatabaseSettings, working_dir: Path) -> None:
        """Initialize config for the project in *working_dir*."""
        self.settings = settings
        self.working_dir = working_dir

    @property
    def type(self) -> DatabaseType:
        """Configured database engine."""
        return self.settings.type

    def is_enabled(self) -> bool:
        """Return True unless the database type is none."""
        return self.settings.type != "none"

    def is_sqlite(self) -> bool:
        """Return True for SQLite."""
        return self.settings.type == "sqlite"

    def is_mysql(self) -> bool:
        """Return True for MySQL."""
        return self.settings.type == "mysql"

    @property
    def sqlite_path(self) -> Path:
        """Location of the SQLite database file."""
        return self.working_dir / SQLITE_FILE_NAME

    def environment_for(self, project_type: ProjectType) -> dict[str, str]:
        """Return the variables the given project type reads its database from."""
        if project_type == "typo3":
            return self.typo3_environment()
        if project_type == "laravel":
            return self.laravel_environment()
        return self.generic_environment()

    def typo3_environment(self) -> dict[str, str]:
        """Variables read by the TYPO3 testing framework."""
        if self.is_sqlite():
            return {
                "typo3DatabaseDriver": "pdo_sqlite",
                "typo3DatabasePath": str(self.sqlite_path),
            }
        if self.is_mysql():
            return {
                "typo3DatabaseDriver": "pdo_mysql",
                "typo3DatabaseHost": self.settings.host,
                "typo3DatabasePort": str(self.settings.port),
                "typo3DatabaseName": self.settings.name,
                "typo3DatabaseUsername": self.settings.user,
                "typo3DatabasePassword": self.settings.password,
            }
        return {}

    def laravel_environment(self) -> dict[str, str]:
        """Variables read by Laravel's database config."""
        if self.is_sqlite():
            return {
                "DB_CONNECTION": "sqlite",
                "DB_DATABASE": str(self.sqlite_path),
            }
        if self.is_mysql():
            return {
                "DB_CONNECTION": "mysql",
                "DB_HOST": self.settings.host,
                "DB_PORT": str(self.settings.port),
                "DB_DATABASE": self.settings.name,
                "DB_USERNAME": self.settings.user,
                "DB_PASSWORD": self.settings.password,
            }
        return {}

    def generic_environment(self) -> dict[str, str]:
        """A single DATABASE_URL."""
        if self.is_sqlite():
            return {"DATABASE_URL": f"sqlite:///{self.sqlite_path}"}
        if self.is_mysql():
            s = self.settings
            return {
                "DATABASE_URL": (
                    f"mysql://{s.user}:{s.password}@{s.host}:{s.port}/{s.name}"
                )
            }
        return {}
