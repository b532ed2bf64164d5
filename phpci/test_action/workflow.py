"""GitHub Actions workflow commands and environment files."""

import logging
import os
import sys
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Literal

logger = logging.getLogger(__name__)

AnnotationLevel = Literal["error", "warning", "notice"]


def escape_data(value: str) -> str:
    """Escape a workflow command message."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: str) -> str:
    """Escape a workflow command property value."""
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


def issue_command(
    command: str, message: str = "", properties: dict[str, str] | None = None
) -> None:
    """Write a ``::command props::message`` line to stdout."""
    props = ",".join(
        f"{key}={escape_property(value)}"
        for key, value in (properties or {}).items()
        if value
    )
    prefix = f"::{command} {props}" if props else f"::{command}"
    sys.stdout.write(f"{prefix}::{escape_data(message)}\n")
    sys.stdout.flush()


def annotate(
    level: AnnotationLevel,
    message: str,
    *,
    file: str | None = None,
    line: int | None = None,
    title: str | None = None,
) -> None:
    """Create an error, warning or notice annotation."""
    properties: dict[str, str] = {}
    if title:
        properties["title"] = title
    if file:
        properties["file"] = file
    if line:
        properties["line"] = str(line)
    issue_command(level, message, properties)


@contextmanager
def group(name: str) -> Iterator[None]:
    """Fold the log lines written inside the block under *name*."""
    issue_command("group", name)
    try:
        yield
    finally:
        issue_command("endgroup")


def _append_file_command(env_var: str, name: str, value: str) -> bool:
    path = os.environ.get(env_var)
    if not path:
        logger.debug(f"{env_var} is not set, dropping {name}")
        return False

    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    with Path(path).open("a", encoding="utf-8") as f:
        f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
    return True


def set_output(name: str, value: object) -> None:
    """Set a step output."""
    _append_file_command("GITHUB_OUTPUT", name, str(value))


def save_state(name: str, value: object) -> None:
    """Save state for the action's post step."""
    _append_file_command("GITHUB_STATE", name, str(value))


def get_state(name: str) -> str:
    """Read state saved by an earlier step of this action."""
    return os.environ.get(f"STATE_{name}", "")


def append_summary(markdown: str) -> None:
    """Append markdown to the job summary."""
    path = os.environ.get("GITHUB_STEP_SUMMARY")
    if not path:
        logger.debug("GITHUB_STEP_SUMMARY is not set, skipping job summary")
        return

    with Path(path).open("a", encoding="utf-8") as f:
        f.write(markdown)
        if not markdown.endswith("\n"):
            f.write("\n")


def set_failed(message: str) -> None:
    """Report the step as failed; the caller sets the exit code."""
    annotate("error", message)
