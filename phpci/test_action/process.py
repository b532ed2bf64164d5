"""Run external commands."""

import asyncio
import logging
import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class CommandResult(BaseModel):
    """Captured outcome of an external command."""

    exit_code: int
    stdout: str = ""
    stderr: str = ""


async def run_command(
    command: str,
    args: list[str] | None = None,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> CommandResult:
    """Run *command* to completion and capture its output.

    The return code is never treated as an error; callers decide.

    Raises:
        FileNotFoundError: If the executable does not exist

    """
    arguments = args or []
    logger.debug(f"Executing: {command} {' '.join(arguments)}")

    process = await asyncio.create_subprocess_exec(
        command,
        *arguments,
        cwd=cwd,
        env={**os.environ, **env} if env else None,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    stdout, stderr = await process.communicate()

    result = CommandResult(
        exit_code=process.returncode if process.returncode is not None else -1,
        stdout=stdout.decode(errors="replace").strip(),
        stderr=stderr.decode(errors="replace").strip(),
    )

    if result.exit_code != 0:
        logger.debug(f"Command failed with exit code {result.exit_code}")
        logger.debug(f"STDOUT: {result.stdout}")
        logger.debug(f"STDERR: {result.stderr}")

    return result
