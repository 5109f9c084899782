"""
Bootstrap module for the crosup binary.

This module handles:
- Platform detection (OS + architecture)
- Release asset location (download URL + cache key)
- Install path management (~/.crosup/bin/)
- Download, extraction and verification of the binary
"""

from crosup_setup.bootstrap.platform import get_platform_info, PlatformInfo
from crosup_setup.bootstrap.paths import get_crosup_home, CrosupPaths
from crosup_setup.bootstrap.locator import locate_asset, DEFAULT_VERSION
from crosup_setup.bootstrap.validation import validate_binary, verify_binary, ToolStatus

__all__ = [
    "get_platform_info",
    "PlatformInfo",
    "get_crosup_home",
    "CrosupPaths",
    "locate_asset",
    "DEFAULT_VERSION",
    "validate_binary",
    "verify_binary",
    "ToolStatus",
]
