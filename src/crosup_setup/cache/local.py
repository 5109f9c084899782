"""Directory-backed cache backend.

Each entry is a ``.tar.gz`` archive in a directory that the CI system
persists between runs (a cache mount, a shared volume, ...). Inside the
archive, the n-th saved path is stored under the member name ``n``, so a
restore must pass the same path list as the save.
"""

from __future__ import annotations

import hashlib
import os
import re
import shutil
import tarfile
import tempfile
from pathlib import Path
from typing import Optional, Sequence

from crosup_setup.cache.base import CacheBackend, CacheError
from crosup_setup.core.logging import get_logger

LOGGER = get_logger(__name__)

# Environment variable naming the cache directory
CROSUP_CACHE_DIR_ENV = "CROSUP_CACHE_DIR"

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def entry_file_name(key: str) -> str:
    """File name for a cache key.

    Keys are sanitized for the filesystem and suffixed with a short digest
    so that two keys differing only in unsafe characters stay apart.
    """
    digest = hashlib.sha256(key.encode("utf-8")).hexdigest()[:12]
    return f"{_UNSAFE_KEY_CHARS.sub('_', key)}-{digest}.tar.gz"


class LocalCacheBackend(CacheBackend):
    """Stores cache entries as archives under ``cache_dir``."""

    def __init__(self, cache_dir: Optional[Path]):
        self._cache_dir = cache_dir

    @classmethod
    def from_env(cls) -> "LocalCacheBackend":
        """Create a backend from the CROSUP_CACHE_DIR environment variable."""
        value = os.environ.get(CROSUP_CACHE_DIR_ENV)
        return cls(Path(value) if value else None)

    @property
    def name(self) -> str:
        return "local"

    @property
    def cache_dir(self) -> Optional[Path]:
        return self._cache_dir

    def is_feature_available(self) -> bool:
        return self._cache_dir is not None

    def describe(self) -> str:
        return f"local ({self._cache_dir})"

    def entry_path(self, key: str) -> Path:
        if self._cache_dir is None:
            raise CacheError("No cache directory configured")
        return self._cache_dir / entry_file_name(key)

    def restore(self, paths: Sequence[Path], key: str) -> bool:
        entry = self.entry_path(key)
        if not entry.is_file():
            LOGGER.debug(f"No cache entry for key {key}")
            return False

        with tempfile.TemporaryDirectory(prefix="crosup-cache-") as tmpdir:
            staging = Path(tmpdir)
            try:
                with tarfile.open(entry, "r:gz") as tar:
                    tar.extractall(path=staging, filter="data")
            except (tarfile.TarError, OSError) as e:
                raise CacheError(f"Unreadable cache entry {entry}: {e}") from e

            for index, path in enumerate(paths):
                if not (staging / str(index)).exists():
                    LOGGER.debug(f"Cache entry {key} does not contain {path}")
                    return False

            for index, path in enumerate(paths):
                _replace(staging / str(index), Path(path))

        LOGGER.debug(f"Restored {len(paths)} path(s) from cache key {key}")
        return True

    def save(self, paths: Sequence[Path], key: str) -> None:
        entry = self.entry_path(key)

        missing = [str(p) for p in paths if not Path(p).exists()]
        if missing:
            raise CacheError(f"Path(s) to cache do not exist: {', '.join(missing)}")

        try:
            entry.parent.mkdir(parents=True, exist_ok=True)
            # Write next to the final file, then swap it in
            fd, tmp_name = tempfile.mkstemp(dir=entry.parent, suffix=".partial")
            os.close(fd)
            try:
                with tarfile.open(tmp_name, "w:gz") as tar:
                    for index, path in enumerate(paths):
                        tar.add(str(path), arcname=str(index))
                os.replace(tmp_name, entry)
            finally:
                Path(tmp_name).unlink(missing_ok=True)
        except (tarfile.TarError, OSError) as e:
            raise CacheError(f"Failed to write cache entry {entry}: {e}") from e

        LOGGER.debug(f"Saved {len(paths)} path(s) to cache key {key}")


def _replace(src: Path, dst: Path) -> None:
    """Copy a restored file or directory over ``dst``."""
    if src.is_dir():
        dst.mkdir(parents=True, exist_ok=True)
        shutil.copytree(src, dst, dirs_exist_ok=True)
    else:
        dst.parent.mkdir(parents=True, exist_ok=True)
        if dst.exists() or dst.is_symlink():
            dst.unlink()
        shutil.copy2(src, dst)
