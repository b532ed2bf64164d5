"""Tests for database provisioning."""

import os
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from phpci.test_action.database.config import DatabaseConfig
from phpci.test_action.database.mysql import setup_mysql
from phpci.test_action.database.provision import DatabaseSetup
from phpci.test_action.errors import ExternalToolError
from phpci.test_action.models.action_inputs import DatabaseSettings
from phpci.test_action.process import CommandResult


async def test_sqlite_recreates_file(tmp_path: Path) -> None:
    """An existing SQLite file is replaced by an empty one."""
    config = DatabaseConfig(DatabaseSettings(type="sqlite"), tmp_path)
    config.sqlite_path.write_text("stale data")

    with patch.dict(os.environ, {}, clear=False):
        assert await DatabaseSetup(config, "laravel").setup()
        assert os.environ["DB_CONNECTION"] == "sqlite"
        assert os.environ["DB_DATABASE"] == str(config.sqlite_path)

    assert config.sqlite_path.read_text() == ""


async def test_disabled_database(tmp_path: Path) -> None:
    """Type none skips provisioning."""
    config = DatabaseConfig(DatabaseSettings(), tmp_path)

    assert not await DatabaseSetup(config, "generic").setup()


async def test_mysql_creates_database(tmp_path: Path) -> None:
    """MySQL is checked and the database created."""
    config = DatabaseConfig(
        DatabaseSettings(type="mysql", name="app_test", password="pw"), tmp_path
    )
    run = AsyncMock(return_value=CommandResult(exit_code=0))

    with (
        patch("phpci.test_action.database.mysql.run_command", run),
        patch.dict(os.environ, {}, clear=False),
    ):
        assert await DatabaseSetup(config, "generic").setup()
        assert os.environ["DATABASE_URL"] == (
            "mysql://root:pw@127.0.0.1:3306/app_test"
        )

    statements = [call.args[1][-1] for call in run.await_args_list]
    assert statements == ["SELECT 1;", "CREATE DATABASE IF NOT EXISTS `app_test`;"]


async def test_mysql_unreachable_raises(tmp_path: Path) -> None:
    """setup_mysql raises when the server cannot be reached."""
    config = DatabaseConfig(DatabaseSettings(type="mysql"), tmp_path)
    run = AsyncMock(return_value=CommandResult(exit_code=1, stderr="refused"))

    with (
        patch("phpci.test_action.database.mysql.run_command", run),
        pytest.raises(ExternalToolError),
    ):
        await setup_mysql(config)


async def test_mysql_failure_is_not_fatal(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """DatabaseSetup turns an unreachable server into a warning."""
    monkeypatch.delenv("DATABASE_URL", raising=False)
    config = DatabaseConfig(DatabaseSettings(type="mysql"), tmp_path)
    run = AsyncMock(side_effect=FileNotFoundError("mysql"))

    with patch("phpci.test_action.database.mysql.run_command", run):
        assert not await DatabaseSetup(config, "generic").setup()

    assert "DATABASE_URL" not in os.environ
