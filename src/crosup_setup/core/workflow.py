"""Pipeline integration: PATH mutation and step outputs.

On GitHub Actions, later steps read ``$GITHUB_PATH`` and ``$GITHUB_OUTPUT``
(file commands). Outside of Actions, only the current process
environment is updated and outputs are logged.
"""

from __future__ import annotations

import os
import uuid
from pathlib import Path
from typing import MutableMapping, Optional

from crosup_setup.core.logging import get_logger

LOGGER = get_logger(__name__)

GITHUB_PATH_ENV = "GITHUB_PATH"
GITHUB_OUTPUT_ENV = "GITHUB_OUTPUT"


class Workflow:
    """Side channel to the enclosing CI pipeline."""

    def __init__(self, environ: Optional[MutableMapping[str, str]] = None):
        self._environ = os.environ if environ is None else environ

    def add_path(self, directory: Path) -> None:
        """Prepend a directory to PATH for this process and later steps."""
        directory_str = str(directory)

        path_file = self._environ.get(GITHUB_PATH_ENV)
        if path_file:
            _append_line(Path(path_file), directory_str)

        current = self._environ.get("PATH", "")
        entries = current.split(os.pathsep) if current else []
        if directory_str not in entries:
            self._environ["PATH"] = os.pathsep.join([directory_str, *entries])
        LOGGER.debug(f"Added {directory_str} to PATH")

    def set_output(self, name: str, value: str) -> None:
        """Publish a step output."""
        output_file = self._environ.get(GITHUB_OUTPUT_ENV)
        if not output_file:
            LOGGER.debug(f"Output {name}={value}")
            return

        if "\n" in value:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            _append_line(Path(output_file), f"{name}<<{delimiter}\n{value}\n{delimiter}")
        else:
            _append_line(Path(output_file), f"{name}={value}")


def _append_line(path: Path, line: str) -> None:
    with open(path, "a", encoding="utf-8") as f:
        f.write(f"{line}\n")
