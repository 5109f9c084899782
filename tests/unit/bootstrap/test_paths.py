"""Tests for crosup_setup.bootstrap.paths."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

from crosup_setup.bootstrap.paths import (
    CROSUP_HOME_ENV,
    CrosupPaths,
    get_crosup_home,
)


class TestGetCrosupHome:
    """Tests for get_crosup_home."""

    def test_default_home(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            assert get_crosup_home() == Path.home() / ".crosup"

    def test_env_override(self, tmp_path: Path) -> None:
        with patch.dict(os.environ, {CROSUP_HOME_ENV: str(tmp_path)}):
            assert get_crosup_home() == tmp_path


class TestCrosupPaths:
    """Tests for CrosupPaths."""

    def test_layout(self, tmp_path: Path) -> None:
        paths = CrosupPaths(tmp_path / ".crosup")
        assert paths.bin_dir == tmp_path / ".crosup" / "bin"
        assert paths.binary_path == tmp_path / ".crosup" / "bin" / "crosup"

    def test_ensure_directories(self, tmp_path: Path) -> None:
        paths = CrosupPaths(tmp_path / ".crosup")
        paths.ensure_directories()
        assert paths.bin_dir.is_dir()

    def test_default_uses_env(self, tmp_path: Path) -> None:
        with patch.dict(os.environ, {CROSUP_HOME_ENV: str(tmp_path)}):
            assert CrosupPaths.default().home == tmp_path
