"""Cache backend interface.

The installer never touches cache storage directly. It asks a backend
to restore or save a list of paths under an exact-match key.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Sequence


class CacheError(Exception):
    """A cache backend could not complete a restore or save."""


class CacheBackend(ABC):
    """Key-addressed store for directory snapshots."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend identifier."""

    def describe(self) -> str:
        """Human-readable description for status output."""
        return self.name

    @abstractmethod
    def is_feature_available(self) -> bool:
        """Whether caching can be used in the current environment."""

    @abstractmethod
    def restore(self, paths: Sequence[Path], key: str) -> bool:
        """Restore ``paths`` from the entry stored under ``key``.

        Returns:
            True on a cache hit, False if no entry exists for the key.
        """

    @abstractmethod
    def save(self, paths: Sequence[Path], key: str) -> None:
        """Store ``paths`` under ``key``.

        Raises:
            CacheError: If the entry could not be written.
        """


class NullCacheBackend(CacheBackend):
    """Backend used when caching is disabled. Never available."""

    @property
    def name(self) -> str:
        return "none"

    def is_feature_available(self) -> bool:
        return False

    def restore(self, paths: Sequence[Path], key: str) -> bool:
        return False

    def save(self, paths: Sequence[Path], key: str) -> None:
        raise CacheError("Caching is disabled")
