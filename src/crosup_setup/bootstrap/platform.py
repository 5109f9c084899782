"""Platform detection for release asset selection."""

from __future__ import annotations

import platform
import sys
from dataclasses import dataclass

# sys.platform prefixes -> normalized OS names
_OS_NAMES = (
    ("darwin", "darwin"),
    ("linux", "linux"),
    ("win32", "windows"),
    ("cygwin", "windows"),
)

# platform.machine() values -> normalized architecture names
_ARCH_NAMES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
}


@dataclass(frozen=True)
class PlatformInfo:
    """Normalized OS and CPU architecture of the running host."""

    os: str
    arch: str

    @property
    def is_windows(self) -> bool:
        return self.os == "windows"


def normalize_os(raw: str) -> str:
    """Map a ``sys.platform`` value to a normalized OS name.

    Unknown values are returned unchanged (e.g. ``freebsd13``).
    """
    for prefix, name in _OS_NAMES:
        if raw.startswith(prefix):
            return name
    return raw


def normalize_arch(raw: str) -> str:
    """Map a ``platform.machine()`` value to a normalized architecture name."""
    return _ARCH_NAMES.get(raw.lower(), raw.lower())


def get_platform_info() -> PlatformInfo:
    """Detect the current platform."""
    return PlatformInfo(
        os=normalize_os(sys.platform),
        arch=normalize_arch(platform.machine()),
    )
