"""Tests for crosup_setup.core.subprocess_runner."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from crosup_setup.core.errors import CommandError
from crosup_setup.core.subprocess_runner import run_command


def make_completed_process(returncode: int, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess:
    """Create a CompletedProcess for testing."""
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


class TestRunCommand:
    """Tests for run_command."""

    def test_success(self) -> None:
        with patch(
            "crosup_setup.core.subprocess_runner.subprocess.run",
            return_value=make_completed_process(0, "ok\n"),
        ) as mock_run:
            output = run_command([Path("/opt/crosup"), "--version"])

        assert output.exit_code == 0
        assert output.stdout == "ok\n"
        assert mock_run.call_args[0][0] == ["/opt/crosup", "--version"]

    def test_non_zero_raises(self) -> None:
        with patch(
            "crosup_setup.core.subprocess_runner.subprocess.run",
            return_value=make_completed_process(2, "", "boom"),
        ):
            with pytest.raises(CommandError) as exc_info:
                run_command(["crosup", "install", "nix"])

        assert exc_info.value.exit_code == 2
        assert exc_info.value.cmd == ["crosup", "install", "nix"]
        assert exc_info.value.stderr == "boom"
        assert "exit code 2" in str(exc_info.value)

    def test_non_zero_ignored(self) -> None:
        with patch(
            "crosup_setup.core.subprocess_runner.subprocess.run",
            return_value=make_completed_process(1, "", "nope"),
        ):
            output = run_command(["crosup"], ignore_return_code=True)

        assert output.exit_code == 1
        assert output.stderr == "nope"

    def test_missing_executable_raises_os_error(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            run_command([tmp_path / "missing"])
