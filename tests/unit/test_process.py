"""Tests for running external commands."""

import sys
from pathlib import Path

import pytest

from phpci.test_action.process import run_command


async def test_run_command_captures_output(tmp_path: Path) -> None:
    """stdout, stderr and the exit code are captured."""
    result = await run_command(
        sys.executable,
        ["-c", "import sys; print('out'); print('err', file=sys.stderr); sys.exit(3)"],
        cwd=tmp_path,
    )

    assert result.exit_code == 3
    assert result.stdout == "out"
    assert result.stderr == "err"


async def test_run_command_passes_environment() -> None:
    """Extra environment variables reach the child process."""
    result = await run_command(
        sys.executable,
        ["-c", "import os; print(os.environ['DB_CONNECTION'])"],
        env={"DB_CONNECTION": "sqlite"},
    )

    assert result.stdout == "sqlite"


async def test_run_command_missing_executable() -> None:
    """A missing executable raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        await run_command("definitely-not-a-real-binary-xyz")
