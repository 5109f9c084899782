"""Configuration validation for crosup-setup.

Warns on unknown keys and wrong types. Does not raise.
"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import get_close_matches
from typing import Any, Dict, List, Optional, Set

from crosup_setup.core.logging import get_logger

LOGGER = get_logger(__name__)

# Valid top-level keys
VALID_TOP_LEVEL_KEYS: Set[str] = {
    "version",
    "packages",
    "cache",
    "download_timeout",
}

# Valid keys under cache section
VALID_CACHE_KEYS: Set[str] = {
    "enabled",
    "dir",
}


@dataclass
class ConfigValidationWarning:
    """A validation warning for configuration."""

    message: str
    source: str
    key: Optional[str] = None
    suggestion: Optional[str] = None


def validate_config(
    data: Dict[str, Any],
    source: str,
) -> List[ConfigValidationWarning]:
    """Validate configuration dictionary.

    Args:
        data: Config dictionary to validate.
        source: Source file path for warning messages.

    Returns:
        List of validation warnings.
    """
    warnings: List[ConfigValidationWarning] = []

    if not isinstance(data, dict):
        warnings.append(ConfigValidationWarning(
            message=f"Config must be a mapping, got {type(data).__name__}",
            source=source,
        ))
        return warnings

    for key in data.keys():
        if key not in VALID_TOP_LEVEL_KEYS:
            warnings.append(ConfigValidationWarning(
                message=f"Unknown top-level key '{key}'",
                source=source,
                key=key,
                suggestion=_suggest_key(key, VALID_TOP_LEVEL_KEYS),
            ))

    version = data.get("version")
    if version is not None and not isinstance(version, str):
        warnings.append(ConfigValidationWarning(
            message=f"'version' must be a string, got {type(version).__name__}",
            source=source,
            key="version",
        ))

    packages = data.get("packages")
    if packages is not None:
        if not isinstance(packages, list):
            warnings.append(ConfigValidationWarning(
                message=f"'packages' must be a list, got {type(packages).__name__}",
                source=source,
                key="packages",
            ))
        elif not all(isinstance(p, str) for p in packages):
            warnings.append(ConfigValidationWarning(
                message="'packages' must only contain strings",
                source=source,
                key="packages",
            ))

    timeout = data.get("download_timeout")
    if timeout is not None and (isinstance(timeout, bool) or not isinstance(timeout, int) or timeout <= 0):
        warnings.append(ConfigValidationWarning(
            message="'download_timeout' must be a positive integer",
            source=source,
            key="download_timeout",
        ))

    cache = data.get("cache")
    if cache is not None:
        if not isinstance(cache, dict):
            warnings.append(ConfigValidationWarning(
                message=f"'cache' must be a mapping, got {type(cache).__name__}",
                source=source,
                key="cache",
            ))
        else:
            for key in cache.keys():
                if key not in VALID_CACHE_KEYS:
                    warnings.append(ConfigValidationWarning(
                        message=f"Unknown key 'cache.{key}'",
                        source=source,
                        key=f"cache.{key}",
                        suggestion=_suggest_key(key, VALID_CACHE_KEYS),
                    ))

            enabled = cache.get("enabled")
            if enabled is not None and not isinstance(enabled, bool):
                warnings.append(ConfigValidationWarning(
                    message="'cache.enabled' must be a boolean",
                    source=source,
                    key="cache.enabled",
                ))

            cache_dir = cache.get("dir")
            if cache_dir is not None and not isinstance(cache_dir, str):
                warnings.append(ConfigValidationWarning(
                    message="'cache.dir' must be a string",
                    source=source,
                    key="cache.dir",
                ))

    for warning in warnings:
        _log_warning(warning)

    return warnings


def _suggest_key(key: str, valid_keys: Set[str]) -> Optional[str]:
    """Suggest the closest valid key for a typo."""
    matches = get_close_matches(key, sorted(valid_keys), n=1, cutoff=0.6)
    return matches[0] if matches else None


def _log_warning(warning: ConfigValidationWarning) -> None:
    message = f"{warning.source}: {warning.message}"
    if warning.suggestion:
        message += f" (did you mean '{warning.suggestion}'?)"
    LOGGER.warning(message)
