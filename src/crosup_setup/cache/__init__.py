"""Cache backends for the crosup install directory."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from crosup_setup.cache.base import CacheBackend, CacheError, NullCacheBackend
from crosup_setup.cache.local import CROSUP_CACHE_DIR_ENV, LocalCacheBackend


def get_cache_backend(enabled: bool = True, cache_dir: Optional[Path] = None) -> CacheBackend:
    """Select the cache backend for a run.

    Args:
        enabled: False disables caching entirely.
        cache_dir: Explicit cache directory; falls back to CROSUP_CACHE_DIR.

    Returns:
        A LocalCacheBackend, or a NullCacheBackend when disabled.
    """
    if not enabled:
        return NullCacheBackend()
    if cache_dir is not None:
        return LocalCacheBackend(cache_dir)
    return LocalCacheBackend.from_env()


__all__ = [
    "CacheBackend",
    "CacheError",
    "NullCacheBackend",
    "LocalCacheBackend",
    "CROSUP_CACHE_DIR_ENV",
    "get_cache_backend",
]
