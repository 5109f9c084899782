"""Exception hierarchy for crosup-setup.

Only ``UnsupportedPlatformError``, ``VerificationError``, ``DownloadError``
and ``CommandError`` may end an installation. Everything else (corrupted
cache entries, cache save failures) is downgraded to a warning.
"""

from __future__ import annotations

from typing import Optional, Sequence


class CrosupSetupError(Exception):
    """Base class for all crosup-setup errors."""


class UnsupportedPlatformError(CrosupSetupError):
    """The host platform cannot run crosup at all."""


class VerificationError(CrosupSetupError):
    """Neither the cache nor a fresh download produced a working binary."""


class DownloadError(CrosupSetupError):
    """Fetching or unpacking the release archive failed."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class CommandError(CrosupSetupError):
    """A checked subprocess exited with a non-zero code."""

    def __init__(
        self,
        cmd: Sequence[str],
        exit_code: int,
        stdout: str = "",
        stderr: str = "",
    ):
        self.cmd = list(cmd)
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(
            f"Command '{' '.join(self.cmd)}' failed with exit code {exit_code}"
        )
