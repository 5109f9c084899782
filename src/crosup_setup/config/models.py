"""Configuration data models for crosup-setup.

Defines typed configuration classes that represent .crosup-setup.yml.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from crosup_setup.core.models import AcquisitionRequest


@dataclass
class CacheConfig:
    """Binary cache configuration."""

    enabled: bool = True
    dir: Optional[str] = None  # Empty = use CROSUP_CACHE_DIR

    @property
    def path(self) -> Optional[Path]:
        return Path(self.dir).expanduser() if self.dir else None


@dataclass
class CrosupSetupConfig:
    """Complete crosup-setup configuration.

    Example .crosup-setup.yml:
        version: v0.4.8
        packages:
          - nix
          - devbox
        cache:
          enabled: true
          dir: ${CI_PROJECT_DIR}/.cache/crosup
    """

    version: Optional[str] = None  # None = default release
    packages: List[str] = field(default_factory=list)
    cache: CacheConfig = field(default_factory=CacheConfig)
    download_timeout: int = 120  # Seconds

    # Metadata (not from YAML, set by loader)
    _config_sources: List[str] = field(default_factory=list, repr=False)

    def to_request(self) -> AcquisitionRequest:
        """Build the installation request for this configuration."""
        return AcquisitionRequest(version=self.version or None, packages=tuple(self.packages))
