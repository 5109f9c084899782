"""Release asset locator.

Maps a release tag plus OS and CPU architecture to the GitHub release
download URL and the cache key for that asset. Pure: no I/O, never raises.

Example asset name: ``crosup_v0.4.8_x86_64-unknown-linux-gnu.tar.gz``
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional
from urllib.parse import quote, urljoin

from crosup_setup.bootstrap.platform import get_platform_info
from crosup_setup.bootstrap.versions import get_tool_version
from crosup_setup.core.models import TargetDescriptor

RELEASES_BASE_URL = "https://github.com/tsirysndr/crosup/releases/download/"

DEFAULT_VERSION = get_tool_version("crosup")

# Normalized OS name -> target triple suffix
OS_TARGETS: Mapping[str, str] = MappingProxyType({
    "darwin": "apple-darwin",
    "linux": "unknown-linux-gnu",
})

# Normalized architecture -> target triple prefix
CPU_TARGETS: Mapping[str, str] = MappingProxyType({
    "amd64": "x86_64",
    "x64": "x86_64",
})

# Same characters as JavaScript's encodeURIComponent leaves alone
_URI_COMPONENT_SAFE = "!~*'()"


def encode_component(value: str) -> str:
    """Percent-encode a single URL path component."""
    return quote(value, safe=_URI_COMPONENT_SAFE)


def map_os(os_name: str) -> str:
    """Translate an OS name to its target suffix, passing unknown names through."""
    return OS_TARGETS.get(os_name, os_name)


def map_arch(arch: str) -> str:
    """Translate an architecture to its target prefix, passing unknown names through."""
    return CPU_TARGETS.get(arch, arch)


def locate_asset(
    version: Optional[str] = None,
    os_name: Optional[str] = None,
    arch: Optional[str] = None,
) -> TargetDescriptor:
    """Compute download URL and cache key for a crosup release asset.

    An OS or architecture missing from the target tables is passed through
    as-is, so the URL names the raw platform value.

    Args:
        version: Release tag. Defaults to DEFAULT_VERSION.
        os_name: Normalized OS name. Defaults to the current platform.
        arch: Normalized architecture. Defaults to the current platform.

    Returns:
        TargetDescriptor with the fully qualified URL and the cache key.
    """
    if os_name is None or arch is None:
        platform_info = get_platform_info()
        os_name = platform_info.os if os_name is None else os_name
        arch = platform_info.arch if arch is None else arch

    release = encode_component(version or DEFAULT_VERSION)
    target_os = encode_component(map_os(os_name))
    raw_arch = encode_component(arch)
    target_arch = map_arch(raw_arch)

    url = urljoin(
        RELEASES_BASE_URL,
        f"{release}/crosup_{release}_{target_arch}-{target_os}.tar.gz",
    )

    return TargetDescriptor(
        url=url,
        cache_key=f"crosup-{release}-{raw_arch}-{target_os}",
    )
