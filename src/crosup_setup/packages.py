"""Post-install step: ``crosup install <packages...>``."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from crosup_setup.core.logging import get_logger
from crosup_setup.core.subprocess_runner import CommandOutput, run_command

LOGGER = get_logger(__name__)

INSTALL_SUBCOMMAND = "install"


def install_packages(binary: Path, packages: Sequence[str]) -> CommandOutput | None:
    """Install packages with crosup in a single invocation.

    Args:
        binary: Path to the verified crosup binary.
        packages: Package names, passed in the given order.

    Returns:
        The command output, or None if there was nothing to install.

    Raises:
        CommandError: If crosup exits with a non-zero code.
    """
    if not packages:
        return None

    LOGGER.info(f"Installing packages: {', '.join(packages)}")
    return run_command([binary, INSTALL_SUBCOMMAND, *packages])
