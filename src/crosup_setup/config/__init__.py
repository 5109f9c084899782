"""Configuration module for crosup-setup.

Provides configuration loading, parsing, and validation with support for:
- Project-level config (.crosup-setup.yml)
- GitHub Actions inputs
- Environment variable expansion
"""

from crosup_setup.config.models import CacheConfig, CrosupSetupConfig
from crosup_setup.config.loader import ConfigError, find_project_config, load_config
from crosup_setup.config.validation import ConfigValidationWarning, validate_config

__all__ = [
    "CacheConfig",
    "CrosupSetupConfig",
    "ConfigError",
    "find_project_config",
    "load_config",
    "validate_config",
    "ConfigValidationWarning",
]
