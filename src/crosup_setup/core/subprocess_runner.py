"""Thin wrapper around ``subprocess.run`` for tool invocations."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Union

from crosup_setup.core.errors import CommandError
from crosup_setup.core.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class CommandOutput:
    """Captured result of a finished command."""

    exit_code: int
    stdout: str
    stderr: str


def run_command(
    cmd: Sequence[Union[str, Path]],
    ignore_return_code: bool = False,
    cwd: Optional[Path] = None,
    timeout: Optional[float] = None,
) -> CommandOutput:
    """Run a command to completion and capture its output.

    Args:
        cmd: Executable followed by its arguments.
        ignore_return_code: If False, a non-zero exit raises CommandError.
        cwd: Working directory.
        timeout: Optional timeout in seconds.

    Returns:
        CommandOutput with exit code, stdout and stderr.

    Raises:
        CommandError: If the command exits non-zero and
            ignore_return_code is False.
        OSError: If the executable cannot be started.
    """
    args = [str(part) for part in cmd]
    LOGGER.debug(f"Running: {' '.join(args)}")

    result = subprocess.run(
        args,
        cwd=cwd,
        capture_output=True,
        text=True,
        timeout=timeout,
        check=False,
    )

    if result.stdout:
        LOGGER.debug(result.stdout.rstrip())
    if result.stderr:
        LOGGER.debug(result.stderr.rstrip())

    output = CommandOutput(
        exit_code=result.returncode,
        stdout=result.stdout or "",
        stderr=result.stderr or "",
    )

    if output.exit_code != 0 and not ignore_return_code:
        raise CommandError(args, output.exit_code, output.stdout, output.stderr)

    return output
