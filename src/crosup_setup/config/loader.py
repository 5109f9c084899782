"""Configuration loading and merging.

Handles loading configuration with:
- Project-level config (.crosup-setup.yml)
- GitHub Actions inputs (INPUT_VERSION, INPUT_PACKAGES, INPUT_CACHE)
- Environment variable expansion (${VAR})
- Config merging with proper precedence
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from crosup_setup.config.models import CacheConfig, CrosupSetupConfig
from crosup_setup.config.validation import validate_config
from crosup_setup.core.logging import get_logger

LOGGER = get_logger(__name__)

# Config file names
PROJECT_CONFIG_NAMES = [".crosup-setup.yml", ".crosup-setup.yaml", "crosup-setup.yml", "crosup-setup.yaml"]

# Environment variable pattern: ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")

# Package lists may be separated by commas, spaces or newlines
_PACKAGE_SEPARATORS = re.compile(r"[\s,]+")

_TRUE_VALUES = {"true", "yes", "1", "on"}
_FALSE_VALUES = {"false", "no", "0", "off"}


class ConfigError(Exception):
    """Configuration loading or parsing error."""

    pass


def load_config(
    project_root: Path,
    cli_config_path: Optional[Path] = None,
    cli_overrides: Optional[Dict[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> CrosupSetupConfig:
    """Load configuration with proper precedence.

    Precedence (highest to lowest):
    1. CLI flags (cli_overrides)
    2. Action inputs (INPUT_* environment variables)
    3. Custom config file (cli_config_path) OR project config (.crosup-setup.yml)
    4. Built-in defaults

    Args:
        project_root: Directory searched for .crosup-setup.yml.
        cli_config_path: Optional path to custom config file (--config flag).
        cli_overrides: Dict of CLI flag overrides.
        environ: Environment mapping (defaults to os.environ).

    Returns:
        Merged CrosupSetupConfig instance.

    Raises:
        ConfigError: If specified config file doesn't exist or has parse errors.
    """
    sources: List[str] = []
    merged: Dict[str, Any] = {}

    # Layer 1: Project or custom config
    if cli_config_path:
        if not cli_config_path.exists():
            raise ConfigError(f"Config file not found: {cli_config_path}")
        config_path: Optional[Path] = cli_config_path
        source_label = "custom"
    else:
        config_path = find_project_config(project_root)
        source_label = "project"

    env = os.environ if environ is None else environ

    if config_path is not None:
        try:
            file_dict = load_yaml_file(config_path, environ=env)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e
        validate_config(file_dict, source=str(config_path))
        merged = merge_configs(merged, file_dict)
        sources.append(f"{source_label}:{config_path}")
        LOGGER.debug(f"Loaded {source_label} config from {config_path}")

    # Layer 2: Action inputs
    input_overrides = action_inputs_to_overrides(env)
    if input_overrides:
        merged = merge_configs(merged, input_overrides)
        sources.append("inputs")
        LOGGER.debug("Applied action inputs")

    # Layer 3: CLI overrides
    if cli_overrides:
        merged = merge_configs(merged, cli_overrides)
        sources.append("cli")
        LOGGER.debug("Applied CLI overrides")

    config = dict_to_config(merged)
    config._config_sources = sources

    LOGGER.debug(f"Config loaded from sources: {sources}")
    return config


def find_project_config(project_root: Path) -> Optional[Path]:
    """Find config file in project root.

    Args:
        project_root: Directory to search in.

    Returns:
        Path to config file if found, None otherwise.
    """
    for name in PROJECT_CONFIG_NAMES:
        config_path = project_root / name
        if config_path.exists():
            return config_path
    return None


def load_yaml_file(path: Path, environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Load and parse a YAML config file.

    Performs environment variable expansion on string values.

    Args:
        path: Path to YAML file.
        environ: Environment used for expansion (defaults to os.environ).

    Returns:
        Parsed dictionary.

    Raises:
        yaml.YAMLError: If YAML parsing fails.
        ConfigError: If the document is not a mapping.
    """
    with open(path, "r", encoding="utf-8") as f:
        content = f.read()

    data = yaml.safe_load(content)

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a YAML mapping, got {type(data).__name__}")

    return expand_env_vars(data, environ)


def expand_env_vars(data: Any, environ: Optional[Mapping[str, str]] = None) -> Any:
    """Recursively expand environment variables in config values.

    Supports ${VAR} and ${VAR:-default} syntax.
    """
    if environ is None:
        environ = os.environ
    if isinstance(data, dict):
        return {k: expand_env_vars(v, environ) for k, v in data.items()}
    elif isinstance(data, list):
        return [expand_env_vars(item, environ) for item in data]
    elif isinstance(data, str):
        return ENV_VAR_PATTERN.sub(lambda match: _env_var_replacer(match, environ), data)
    else:
        return data


def _env_var_replacer(match: re.Match[str], environ: Mapping[str, str]) -> str:
    """Replace environment variable reference with its value."""
    var_name = match.group(1)
    default_value = match.group(2)

    value = environ.get(var_name)
    if value is not None:
        return value
    if default_value is not None:
        return default_value

    LOGGER.warning(f"Environment variable ${var_name} is not set and has no default")
    return ""


def split_packages(value: str) -> List[str]:
    """Split a package input string into package names."""
    return [p for p in _PACKAGE_SEPARATORS.split(value.strip()) if p]


def parse_bool(value: str) -> Optional[bool]:
    """Parse a boolean input value. Returns None if unrecognized."""
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return None


def action_inputs_to_overrides(environ: Mapping[str, str]) -> Dict[str, Any]:
    """Convert GitHub Actions inputs to config overrides.

    Empty inputs are treated as unset.
    """
    overrides: Dict[str, Any] = {}

    version = environ.get("INPUT_VERSION", "").strip()
    if version:
        overrides["version"] = version

    packages = environ.get("INPUT_PACKAGES", "")
    if packages.strip():
        overrides["packages"] = split_packages(packages)

    cache = environ.get("INPUT_CACHE", "")
    if cache.strip():
        enabled = parse_bool(cache)
        if enabled is None:
            LOGGER.warning(f"Ignoring invalid value for input 'cache': {cache!r}")
        else:
            overrides["cache"] = {"enabled": enabled}

    return overrides


def merge_configs(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge two config dicts, with overlay taking precedence.

    Rules:
    - Scalar values: overlay replaces base
    - Lists: overlay replaces base (no merging)
    - Dicts: recursive merge
    """
    result = base.copy()

    for key, overlay_value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(overlay_value, dict):
            result[key] = merge_configs(result[key], overlay_value)
        else:
            result[key] = overlay_value

    return result


def dict_to_config(data: Dict[str, Any]) -> CrosupSetupConfig:
    """Convert a merged dict to a typed CrosupSetupConfig.

    Values with the wrong type were already reported by validation and
    fall back to their defaults here.
    """
    cache_data = data.get("cache")
    if not isinstance(cache_data, dict):
        cache_data = {}

    enabled = cache_data.get("enabled", True)
    cache_dir = cache_data.get("dir")
    cache = CacheConfig(
        enabled=enabled if isinstance(enabled, bool) else True,
        dir=cache_dir if isinstance(cache_dir, str) and cache_dir else None,
    )

    version = data.get("version")
    packages = data.get("packages", [])
    timeout = data.get("download_timeout", 120)

    return CrosupSetupConfig(
        version=version if isinstance(version, str) and version else None,
        packages=[str(p) for p in packages] if isinstance(packages, list) else [],
        cache=cache,
        download_timeout=timeout if isinstance(timeout, int) and not isinstance(timeout, bool) and timeout > 0 else 120,
    )
