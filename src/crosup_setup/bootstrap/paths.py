"""Path management for the crosup install directory.

crosup is installed as a single binary at ``~/.crosup/bin/crosup``.
Installing a different release overwrites that file in place.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar

# Default directory name under user home
DEFAULT_HOME_DIR_NAME = ".crosup"

# Environment variable to override home directory
CROSUP_HOME_ENV = "CROSUP_HOME"

BINARY_NAME = "crosup"


def get_crosup_home() -> Path:
    """Get the crosup home directory path.

    Resolution order:
    1. CROSUP_HOME environment variable (if set)
    2. ~/.crosup (default)

    Returns:
        Path to the crosup home directory.
    """
    env_home = os.environ.get(CROSUP_HOME_ENV)
    if env_home:
        return Path(env_home)
    return Path.home() / DEFAULT_HOME_DIR_NAME


@dataclass
class CrosupPaths:
    """Manages paths within the crosup home directory.

    Directory structure:
        ~/.crosup/
            bin/
                crosup      - installed binary (single version)
    """

    home: Path

    _BIN_DIR: ClassVar[str] = "bin"

    @classmethod
    def default(cls) -> "CrosupPaths":
        """Create paths from the default crosup home."""
        return cls(get_crosup_home())

    @property
    def bin_dir(self) -> Path:
        """Directory added to PATH and saved to the cache."""
        return self.home / self._BIN_DIR

    @property
    def binary_path(self) -> Path:
        """Fixed install location of the crosup binary."""
        return self.bin_dir / BINARY_NAME

    def ensure_directories(self) -> None:
        """Create the install directory if it doesn't exist."""
        self.bin_dir.mkdir(parents=True, exist_ok=True)
