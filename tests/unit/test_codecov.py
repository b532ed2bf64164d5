"""Tests for the Codecov upload."""

from pathlib import Path
from unittest.mock import AsyncMock, patch

from phpci.test_action.codecov import upload_coverage
from phpci.test_action.process import CommandResult


async def test_upload_with_token(tmp_path: Path) -> None:
    """The Codecov CLI receives the report and token."""
    clover = tmp_path / "clover.xml"
    run = AsyncMock(return_value=CommandResult(exit_code=0))

    with patch("phpci.test_action.codecov.run_command", run):
        assert await upload_coverage(clover, "secret")

    run.assert_awaited_once_with(
        "codecovcli", ["upload-process", "--file", str(clover), "--token", "secret"]
    )


async def test_upload_failure_is_warning(tmp_path: Path) -> None:
    """A failed upload is reported as False."""
    run = AsyncMock(return_value=CommandResult(exit_code=1, stderr="rate limited"))

    with patch("phpci.test_action.codecov.run_command", run):
        assert not await upload_coverage(tmp_path / "clover.xml")


async def test_codecov_cli_missing(tmp_path: Path) -> None:
    """A missing Codecov CLI is reported as False."""
    run = AsyncMock(side_effect=FileNotFoundError("codecovcli"))

    with patch("phpci.test_action.codecov.run_command", run):
        assert not await upload_coverage(tmp_path / "clover.xml")
