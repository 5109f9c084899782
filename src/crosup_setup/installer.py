"""Crosup installation flow.

Restores the binary from the cache when possible, otherwise downloads the
release archive. Either way the binary must pass ``crosup --version``
before it is reported, saved to the cache, or used to install packages.

Flow per run:
    START -> cache check -> {RESTORED_VALID | RESTORE_MISS | RESTORED_CORRUPT}
          -> download (unless RESTORED_VALID) -> VERIFIED
          -> cache save (best effort) -> package install (optional) -> DONE
"""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path
from typing import Optional

from crosup_setup.bootstrap.download import (
    DEFAULT_TIMEOUT,
    download_tool,
    extract_tar,
    find_executable,
    move_file,
)
from crosup_setup.bootstrap.locator import OS_TARGETS, locate_asset
from crosup_setup.bootstrap.paths import BINARY_NAME, CrosupPaths
from crosup_setup.bootstrap.platform import PlatformInfo, get_platform_info
from crosup_setup.bootstrap.validation import verify_binary
from crosup_setup.cache.base import CacheBackend
from crosup_setup.core.advisory import run_advisory
from crosup_setup.core.errors import UnsupportedPlatformError, VerificationError
from crosup_setup.core.logging import get_logger
from crosup_setup.core.models import (
    AcquisitionRequest,
    AcquisitionResult,
    InstalledArtifact,
    TargetDescriptor,
)
from crosup_setup.core.workflow import Workflow
from crosup_setup.packages import install_packages

LOGGER = get_logger(__name__)


class CrosupInstaller:
    """Installs crosup into ``~/.crosup/bin`` for the current platform."""

    def __init__(
        self,
        cache: CacheBackend,
        platform_info: Optional[PlatformInfo] = None,
        paths: Optional[CrosupPaths] = None,
        workflow: Optional[Workflow] = None,
        download_timeout: float = DEFAULT_TIMEOUT,
    ):
        """Initialize CrosupInstaller.

        Args:
            cache: Cache backend used for restore and save.
            platform_info: Host platform (detected if omitted).
            paths: Install paths (defaults to ~/.crosup).
            workflow: Pipeline side channel for PATH updates.
            download_timeout: Socket timeout for the archive download.
        """
        self._cache = cache
        self._platform = platform_info or get_platform_info()
        self._paths = paths or CrosupPaths.default()
        self._workflow = workflow or Workflow()
        self._download_timeout = download_timeout

    @property
    def paths(self) -> CrosupPaths:
        return self._paths

    def install(self, request: AcquisitionRequest) -> AcquisitionResult:
        """Install crosup and optionally a list of packages.

        Args:
            request: Requested release tag and packages.

        Returns:
            AcquisitionResult with the version reported by the binary.

        Raises:
            UnsupportedPlatformError: On Windows or an unknown OS.
            DownloadError: If the release archive cannot be fetched.
            VerificationError: If no working binary could be obtained.
            CommandError: If ``crosup install`` fails.
            OSError: If the install directory or the PATH file cannot be written.
        """
        self._check_platform()

        target = locate_asset(
            version=request.version,
            os_name=self._platform.os,
            arch=self._platform.arch,
        )
        cache_enabled = bool(target.cache_key) and self._cache.is_feature_available()

        install_dir = self._paths.bin_dir
        self._paths.ensure_directories()
        self._workflow.add_path(install_dir)
        artifact = InstalledArtifact(path=self._paths.binary_path)
        cache_hit = False

        if cache_enabled:
            cache_hit = self._restore_from_cache(target, artifact)

        if not cache_hit:
            self._download(target, artifact)

        if artifact.version is None:
            raise VerificationError("Unable to verify the downloaded version of Crosup")

        if cache_enabled:
            run_advisory(
                "save the downloaded version of Crosup to the cache",
                self._cache.save,
                [install_dir],
                target.cache_key,
            )

        install_packages(artifact.path, request.packages)

        return AcquisitionResult(version=artifact.version, cache_hit=cache_hit)

    def _check_platform(self) -> None:
        if self._platform.is_windows:
            raise UnsupportedPlatformError("Crosup is not supported on Windows")
        if self._platform.os not in OS_TARGETS:
            raise UnsupportedPlatformError(
                f"Crosup is not supported on {self._platform.os}-{self._platform.arch}"
            )

    def _restore_from_cache(self, target: TargetDescriptor, artifact: InstalledArtifact) -> bool:
        """Try the cache. Returns True only for a restored binary that verifies."""
        try:
            restored = self._cache.restore([self._paths.bin_dir], target.cache_key)
        except Exception as e:
            LOGGER.warning(f"Failed to restore Crosup from the cache: {e}")
            return False

        if not restored:
            return False

        result = verify_binary(artifact.path)
        if artifact.accept(result):
            LOGGER.info(f"Crosup {artifact.version} restored from cache")
            return True

        LOGGER.warning(
            "Found a cached version of Crosup, but it appears to be corrupted? "
            "Attempting to download a new version."
        )
        LOGGER.debug(f"Cached binary check: {result}")
        return False

    def _download(self, target: TargetDescriptor, artifact: InstalledArtifact) -> None:
        LOGGER.info(f"Downloading a new version of Crosup: {target.url}")

        tar_path = download_tool(target.url, timeout=self._download_timeout)
        extracted = Path(tempfile.mkdtemp(prefix="crosup-"))
        try:
            extract_tar(tar_path, extracted)
            exe_path = find_executable(extracted, BINARY_NAME)
            move_file(exe_path, artifact.path)
        finally:
            tar_path.unlink(missing_ok=True)
            shutil.rmtree(extracted, ignore_errors=True)

        artifact.path.chmod(0o755)
        result = verify_binary(artifact.path)
        if not artifact.accept(result):
            LOGGER.debug(f"Downloaded binary check: {result}")
