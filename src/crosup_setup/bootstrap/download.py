"""Download, extract and move primitives for release archives."""

from __future__ import annotations

import shutil
import ssl
import tarfile
import tempfile
from http.client import HTTPException
from pathlib import Path
from typing import Optional
from urllib.error import URLError
from urllib.request import Request, urlopen

from crosup_setup.core.errors import DownloadError
from crosup_setup.core.logging import get_logger

LOGGER = get_logger(__name__)

ALLOWED_URL_PREFIX = "https://github.com/"

# Socket timeout for downloads in seconds
DEFAULT_TIMEOUT = 120

_CHUNK_SIZE = 1024 * 64


def secure_urlopen(url: str, timeout: float = DEFAULT_TIMEOUT):
    """Open an HTTPS URL on the release host with certificate checks.

    Raises:
        ValueError: If the URL is not a GitHub HTTPS URL.
    """
    if not url.startswith(ALLOWED_URL_PREFIX):
        raise ValueError(f"Invalid download URL: {url}")

    context = ssl.create_default_context()
    request = Request(url, headers={"User-Agent": "crosup-setup"})
    return urlopen(request, timeout=timeout, context=context)  # nosec B310 nosemgrep


def download_tool(
    url: str,
    dest_dir: Optional[Path] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Path:
    """Download a file to a temporary location.

    Args:
        url: URL to download.
        dest_dir: Directory for the downloaded file (defaults to the
            system temp directory).
        timeout: Socket timeout in seconds.

    Returns:
        Path to the downloaded file.

    Raises:
        DownloadError: On HTTP or network errors.
    """
    # Use delete=False and manually clean up to avoid Windows file locking issues
    tmp_file = tempfile.NamedTemporaryFile(suffix=".tar.gz", dir=dest_dir, delete=False)
    tmp_path = Path(tmp_file.name)

    try:
        with secure_urlopen(url, timeout=timeout) as response:
            shutil.copyfileobj(response, tmp_file, _CHUNK_SIZE)
    except (URLError, HTTPException, OSError, ValueError) as e:
        tmp_file.close()
        tmp_path.unlink(missing_ok=True)
        raise DownloadError(f"Failed to download {url}: {e}", url=url) from e
    finally:
        if not tmp_file.closed:
            tmp_file.close()

    LOGGER.debug(f"Downloaded {url} to {tmp_path}")
    return tmp_path


def extract_tar(tar_path: Path, dest_dir: Optional[Path] = None) -> Path:
    """Extract a gzipped tarball safely.

    Args:
        tar_path: Path to the ``.tar.gz`` file.
        dest_dir: Extraction directory (defaults to a fresh temp directory).

    Returns:
        Path to the extraction directory.

    Raises:
        DownloadError: If the archive is unreadable or a member escapes
            the destination directory.
    """
    if dest_dir is None:
        dest_dir = Path(tempfile.mkdtemp(prefix="crosup-"))
    dest_dir.mkdir(parents=True, exist_ok=True)
    root = dest_dir.resolve()

    try:
        with tarfile.open(tar_path, "r:gz") as tar:
            for member in tar.getmembers():
                # Validate each member path to prevent traversal attacks
                member_path = (dest_dir / member.name).resolve()
                if not member_path.is_relative_to(root):
                    raise DownloadError(f"Path traversal detected: {member.name}")
            tar.extractall(path=dest_dir, filter="data")
    except (tarfile.TarError, OSError) as e:
        raise DownloadError(f"Failed to extract {tar_path}: {e}") from e

    return dest_dir


def find_executable(root: Path, name: str) -> Path:
    """Locate an executable by name in an extracted archive.

    The top level is checked first, then the whole tree.

    Raises:
        DownloadError: If no file with that name exists.
    """
    candidate = root / name
    if candidate.is_file():
        return candidate

    for path in sorted(root.rglob(name)):
        if path.is_file():
            return path

    raise DownloadError(f"'{name}' not found in extracted archive {root}")


def move_file(src: Path, dst: Path) -> None:
    """Move a file, overwriting whatever is at the destination."""
    dst.parent.mkdir(parents=True, exist_ok=True)
    if dst.exists() or dst.is_symlink():
        dst.unlink()
    shutil.move(str(src), str(dst))
