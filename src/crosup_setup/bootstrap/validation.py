"""Binary validation for the installed crosup executable.

``validate_binary`` is a cheap filesystem check used for status output.
``verify_binary`` actually runs the binary and is the only signal the
installer trusts.
"""

from __future__ import annotations

import os
import subprocess
from enum import Enum
from pathlib import Path

from crosup_setup.core.logging import get_logger
from crosup_setup.core.models import VerificationResult
from crosup_setup.core.subprocess_runner import run_command

LOGGER = get_logger(__name__)

VERSION_FLAG = "--version"

# Upper bound for the version probe in seconds
VERIFY_TIMEOUT = 60


class ToolStatus(str, Enum):
    """Status of a tool binary."""

    PRESENT = "present"
    MISSING = "missing"
    NOT_EXECUTABLE = "not_executable"


def validate_binary(path: Path) -> ToolStatus:
    """Validate a single binary file.

    Args:
        path: Path to the binary file.

    Returns:
        ToolStatus indicating whether the binary is present and executable.
    """
    if not path.exists():
        return ToolStatus.MISSING

    if not os.access(path, os.X_OK):
        return ToolStatus.NOT_EXECUTABLE

    return ToolStatus.PRESENT


def verify_binary(path: Path) -> VerificationResult:
    """Run ``<path> --version`` and interpret the result.

    A non-zero exit, a hung probe, or a file that cannot be executed at
    all yields an ``Absent`` result instead of an exception.

    Args:
        path: Path to the crosup binary.

    Returns:
        Valid(version) with the trimmed stdout, or Absent(reason).
    """
    try:
        output = run_command([path, VERSION_FLAG], ignore_return_code=True, timeout=VERIFY_TIMEOUT)
    except (OSError, subprocess.TimeoutExpired) as e:
        LOGGER.debug(f"Could not execute {path}: {e}")
        return VerificationResult.absent(f"could not execute {path}: {e}")

    if output.exit_code != 0:
        LOGGER.debug(f"{path} {VERSION_FLAG} exited with code {output.exit_code}")
        return VerificationResult.absent(f"exited with code {output.exit_code}")

    return VerificationResult.valid(output.stdout.strip())
