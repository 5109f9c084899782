"""Core data models for crosup-setup.

These types describe one installation run: what was requested, where the
release asset lives, what the version probe said, and what the run
reports back to the pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class AcquisitionRequest:
    """Caller input for a single installation run.

    Attributes:
        version: Release tag to install (e.g. ``v0.4.8``). ``None`` selects
            the default release.
        packages: Package names passed to ``crosup install``, in order.
    """

    version: Optional[str] = None
    packages: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # Accept any sequence but store an immutable tuple
        object.__setattr__(self, "packages", tuple(self.packages))


@dataclass(frozen=True)
class TargetDescriptor:
    """Where to download the release asset and how to cache it."""

    url: str
    cache_key: str


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of running ``crosup --version`` against a path.

    Either ``Valid`` (carries the reported version) or ``Absent`` (carries
    the reason). Use the ``valid``/``absent`` constructors.
    """

    version: Optional[str] = None
    reason: Optional[str] = None

    @classmethod
    def valid(cls, version: str) -> "VerificationResult":
        return cls(version=version)

    @classmethod
    def absent(cls, reason: str) -> "VerificationResult":
        return cls(reason=reason)

    @property
    def is_valid(self) -> bool:
        return self.version is not None

    def __str__(self) -> str:
        if self.is_valid:
            return f"Valid({self.version})"
        return f"Absent({self.reason})"


@dataclass
class InstalledArtifact:
    """The crosup binary at the fixed install path.

    ``version`` stays ``None`` until the version probe succeeded against
    ``path``.
    """

    path: Path
    version: Optional[str] = None

    def accept(self, result: VerificationResult) -> bool:
        """Record a verification result for this path.

        Returns:
            True if the artifact is now verified.
        """
        self.version = result.version if result.is_valid else None
        return self.version is not None


@dataclass(frozen=True)
class AcquisitionResult:
    """Outcome of a successful installation."""

    version: str
    cache_hit: bool

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"version": self.version, "cache_hit": self.cache_hit}

    def to_outputs(self) -> Dict[str, str]:
        """Pipeline step outputs (names follow the action's output names)."""
        return {
            "version": self.version,
            "cache-hit": "true" if self.cache_hit else "false",
        }
