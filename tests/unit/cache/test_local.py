"""Tests for crosup_setup.cache."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from crosup_setup.cache import (
    CROSUP_CACHE_DIR_ENV,
    CacheError,
    LocalCacheBackend,
    NullCacheBackend,
    get_cache_backend,
)
from crosup_setup.cache.local import entry_file_name

KEY = "crosup-v0.4.8-amd64-unknown-linux-gnu"


@pytest.fixture
def install_dir(tmp_path: Path) -> Path:
    bin_dir = tmp_path / "home" / ".crosup" / "bin"
    bin_dir.mkdir(parents=True)
    binary = bin_dir / "crosup"
    binary.write_text("#!/bin/sh\necho crosup\n")
    binary.chmod(0o755)
    return bin_dir


class TestEntryFileName:
    """Tests for entry_file_name."""

    def test_safe_key(self) -> None:
        assert entry_file_name(KEY).startswith(f"{KEY}-")
        assert entry_file_name(KEY).endswith(".tar.gz")

    def test_unsafe_characters_are_replaced(self) -> None:
        name = entry_file_name("crosup-v1%2F2-amd64/../x")
        assert "/" not in name
        assert "%" not in name

    def test_distinct_keys_stay_distinct(self) -> None:
        assert entry_file_name("a/b") != entry_file_name("a_b")


class TestLocalCacheBackend:
    """Tests for LocalCacheBackend."""

    def test_unavailable_without_directory(self) -> None:
        backend = LocalCacheBackend(None)
        assert backend.is_feature_available() is False
        with pytest.raises(CacheError):
            backend.entry_path(KEY)

    def test_available_with_directory(self, tmp_path: Path) -> None:
        assert LocalCacheBackend(tmp_path / "cache").is_feature_available() is True

    def test_restore_unknown_key_is_miss(self, tmp_path: Path, install_dir: Path) -> None:
        backend = LocalCacheBackend(tmp_path / "cache")
        assert backend.restore([install_dir], KEY) is False

    def test_save_then_restore(self, tmp_path: Path, install_dir: Path) -> None:
        backend = LocalCacheBackend(tmp_path / "cache")
        original = (install_dir / "crosup").read_text()

        backend.save([install_dir], KEY)
        (install_dir / "crosup").unlink()
        install_dir.rmdir()

        assert backend.restore([install_dir], KEY) is True
        restored = install_dir / "crosup"
        assert restored.read_text() == original
        assert os.access(restored, os.X_OK)

    def test_restore_overwrites_existing_file(self, tmp_path: Path, install_dir: Path) -> None:
        backend = LocalCacheBackend(tmp_path / "cache")
        backend.save([install_dir], KEY)
        (install_dir / "crosup").write_text("garbage")

        assert backend.restore([install_dir], KEY) is True
        assert "echo crosup" in (install_dir / "crosup").read_text()

    def test_save_single_file(self, tmp_path: Path, install_dir: Path) -> None:
        backend = LocalCacheBackend(tmp_path / "cache")
        binary = install_dir / "crosup"
        backend.save([binary], KEY)
        binary.unlink()

        assert backend.restore([binary], KEY) is True
        assert binary.is_file()

    def test_restore_with_other_paths_is_miss(self, tmp_path: Path, install_dir: Path) -> None:
        backend = LocalCacheBackend(tmp_path / "cache")
        backend.save([install_dir], KEY)
        assert backend.restore([install_dir, tmp_path / "other"], KEY) is False

    def test_save_missing_path_raises(self, tmp_path: Path) -> None:
        backend = LocalCacheBackend(tmp_path / "cache")
        with pytest.raises(CacheError, match="do not exist"):
            backend.save([tmp_path / "missing"], KEY)

    def test_corrupt_entry_raises(self, tmp_path: Path, install_dir: Path) -> None:
        backend = LocalCacheBackend(tmp_path / "cache")
        entry = backend.entry_path(KEY)
        entry.parent.mkdir(parents=True)
        entry.write_bytes(b"not an archive")
        with pytest.raises(CacheError, match="Unreadable"):
            backend.restore([install_dir], KEY)

    def test_save_leaves_no_partial_files(self, tmp_path: Path, install_dir: Path) -> None:
        backend = LocalCacheBackend(tmp_path / "cache")
        backend.save([install_dir], KEY)
        names = [p.name for p in (tmp_path / "cache").iterdir()]
        assert names == [entry_file_name(KEY)]

    def test_from_env(self, tmp_path: Path) -> None:
        with patch.dict(os.environ, {CROSUP_CACHE_DIR_ENV: str(tmp_path)}):
            backend = LocalCacheBackend.from_env()
        assert backend.cache_dir == tmp_path

    def test_describe(self, tmp_path: Path) -> None:
        assert str(tmp_path) in LocalCacheBackend(tmp_path).describe()


class TestNullCacheBackend:
    """Tests for NullCacheBackend."""

    def test_never_available(self, tmp_path: Path) -> None:
        backend = NullCacheBackend()
        assert backend.is_feature_available() is False
        assert backend.restore([tmp_path], KEY) is False
        with pytest.raises(CacheError):
            backend.save([tmp_path], KEY)


class TestGetCacheBackend:
    """Tests for get_cache_backend."""

    def test_disabled(self, tmp_path: Path) -> None:
        assert isinstance(get_cache_backend(enabled=False, cache_dir=tmp_path), NullCacheBackend)

    def test_explicit_directory(self, tmp_path: Path) -> None:
        backend = get_cache_backend(cache_dir=tmp_path)
        assert isinstance(backend, LocalCacheBackend)
        assert backend.cache_dir == tmp_path

    def test_env_directory(self, tmp_path: Path) -> None:
        with patch.dict(os.environ, {CROSUP_CACHE_DIR_ENV: str(tmp_path)}):
            backend = get_cache_backend()
        assert backend.is_feature_available()

    def test_no_directory_is_unavailable(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            assert get_cache_backend().is_feature_available() is False
