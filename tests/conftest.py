"""Shared fixtures for crosup-setup tests."""

from __future__ import annotations

import io
import logging
import tarfile
from pathlib import Path
from typing import Callable

import pytest

from crosup_setup.core.logging import ROOT_LOGGER_NAME

def _script(stdout: str, exit_code: int) -> str:
    return f"#!/bin/sh\nprintf '%s\\n' '{stdout}'\nexit {exit_code}\n"


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo configure_logging() between tests so caplog keeps working."""
    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def make_binary() -> Callable[..., Path]:
    """Write an executable shell script that acts like crosup."""

    def _make(path: Path, stdout: str = "crosup 0.4.8", exit_code: int = 0) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(_script(stdout, exit_code))
        path.chmod(0o755)
        return path

    return _make


@pytest.fixture
def make_tarball(tmp_path: Path) -> Callable[..., Path]:
    """Build a release-style .tar.gz containing a fake crosup binary."""
    counter = {"n": 0}

    def _make(
        stdout: str = "crosup 0.4.8",
        exit_code: int = 0,
        member_name: str = "crosup",
    ) -> Path:
        counter["n"] += 1
        archive = tmp_path / f"release-{counter['n']}.tar.gz"
        data = _script(stdout, exit_code).encode()
        with tarfile.open(archive, "w:gz") as tar:
            info = tarfile.TarInfo(member_name)
            info.size = len(data)
            info.mode = 0o755
            tar.addfile(info, io.BytesIO(data))
        return archive

    return _make
