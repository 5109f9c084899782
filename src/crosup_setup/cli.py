from __future__ import annotations

import argparse
import json
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from crosup_setup.bootstrap.locator import DEFAULT_VERSION, locate_asset
from crosup_setup.bootstrap.paths import CrosupPaths
from crosup_setup.bootstrap.platform import get_platform_info
from crosup_setup.bootstrap.validation import ToolStatus, validate_binary
from crosup_setup.cache import get_cache_backend
from crosup_setup.config import CrosupSetupConfig, load_config
from crosup_setup.config.loader import ConfigError
from crosup_setup.core.errors import (
    CommandError,
    DownloadError,
    UnsupportedPlatformError,
    VerificationError,
)
from crosup_setup.core.logging import configure_logging, get_logger
from crosup_setup.core.workflow import Workflow
from crosup_setup.installer import CrosupInstaller

LOGGER = get_logger(__name__)

EXIT_SUCCESS = 0
EXIT_INSTALL_FAILURE = 1
EXIT_PACKAGE_FAILURE = 2
EXIT_INVALID_USAGE = 3
EXIT_UNSUPPORTED_PLATFORM = 4


def _get_version() -> str:
    try:
        return version("crosup-setup")
    except PackageNotFoundError:
        # Fallback for editable installs that have not yet built metadata.
        from crosup_setup import __version__

        return __version__


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crosup-setup",
        description="crosup-setup - Install the crosup CLI on a CI runner.",
    )

    # Global options
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show crosup-setup version and exit.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Reduce logging output to errors only.",
    )
    parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Result output format (default: text).",
    )
    parser.add_argument(
        "--status",
        action="store_true",
        help="Show platform, install location and binary status, then exit.",
    )

    # Installation
    parser.add_argument(
        "packages",
        nargs="*",
        metavar="PACKAGE",
        help="Packages to install with 'crosup install' after setup.",
    )
    parser.add_argument(
        "--version-tag",
        metavar="TAG",
        default=None,
        help=f"crosup release tag to install (default: {DEFAULT_VERSION}).",
    )

    # Cache
    parser.add_argument(
        "--no-cache",
        action="store_true",
        help="Do not restore or save the binary cache.",
    )
    parser.add_argument(
        "--cache-dir",
        metavar="PATH",
        default=None,
        help="Directory holding cache entries (default: $CROSUP_CACHE_DIR).",
    )

    # Configuration
    parser.add_argument(
        "--config",
        metavar="PATH",
        type=Path,
        help="Path to config file (default: .crosup-setup.yml in the current directory).",
    )

    return parser


def cli_args_to_config_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Convert CLI arguments to config override dict.

    Only explicitly provided arguments override config values.
    """
    overrides: Dict[str, Any] = {}

    if args.version_tag:
        overrides["version"] = args.version_tag

    if args.packages:
        overrides["packages"] = list(args.packages)

    cache: Dict[str, Any] = {}
    if args.no_cache:
        cache["enabled"] = False
    if args.cache_dir:
        cache["dir"] = args.cache_dir
    if cache:
        overrides["cache"] = cache

    return overrides


def _handle_status(config: CrosupSetupConfig) -> int:
    """Handle --status command.

    Returns:
        Exit code (0 for success).
    """
    paths = CrosupPaths.default()
    platform_info = get_platform_info()
    target = locate_asset(version=config.version, os_name=platform_info.os, arch=platform_info.arch)
    cache = get_cache_backend(config.cache.enabled, config.cache.path)

    print(f"crosup-setup version: {_get_version()}")
    print(f"Platform: {platform_info.os}-{platform_info.arch}")
    print(f"Install path: {paths.binary_path}")

    status = validate_binary(paths.binary_path)
    if status == ToolStatus.PRESENT:
        print("Binary: installed")
    elif status == ToolStatus.NOT_EXECUTABLE:
        print("Binary: present but not executable")
    else:
        print("Binary: not installed")

    print(f"Release asset: {target.url}")
    print(f"Cache key: {target.cache_key}")
    if cache.is_feature_available():
        print(f"Cache: {cache.describe()}")
    else:
        print("Cache: unavailable")

    return EXIT_SUCCESS


def _run_install(args: argparse.Namespace, config: CrosupSetupConfig) -> int:
    workflow = Workflow()
    installer = CrosupInstaller(
        cache=get_cache_backend(config.cache.enabled, config.cache.path),
        workflow=workflow,
        download_timeout=config.download_timeout,
    )

    try:
        result = installer.install(config.to_request())
    except UnsupportedPlatformError as e:
        LOGGER.error(str(e))
        return EXIT_UNSUPPORTED_PLATFORM
    except (DownloadError, VerificationError) as e:
        LOGGER.error(str(e))
        return EXIT_INSTALL_FAILURE
    except OSError as e:
        LOGGER.error(f"Failed to install Crosup: {e}")
        return EXIT_INSTALL_FAILURE
    except CommandError as e:
        LOGGER.error(f"Package installation failed: {e}")
        if e.stderr:
            LOGGER.error(e.stderr.rstrip())
        return EXIT_PACKAGE_FAILURE

    for name, value in result.to_outputs().items():
        workflow.set_output(name, value)

    if args.format == "json":
        print(json.dumps(result.to_dict()))
    else:
        source = "cache" if result.cache_hit else "download"
        print(f"{result.version} (from {source})")

    return EXIT_SUCCESS


def main(argv: Optional[Iterable[str]] = None) -> int:
    """CLI entrypoint.

    Returns an exit code suitable for use as a console script.
    """

    parser = build_parser()

    # Handle --help specially to return 0
    if argv is not None:
        argv_list = list(argv)
        if "--help" in argv_list or "-h" in argv_list:
            parser.print_help()
            return EXIT_SUCCESS
    else:
        argv_list = None

    args = parser.parse_args(argv_list)

    # Configure logging as early as possible.
    configure_logging(debug=args.debug, quiet=args.quiet)

    if args.version:
        print(_get_version())
        return EXIT_SUCCESS

    try:
        config = load_config(
            project_root=Path.cwd(),
            cli_config_path=args.config,
            cli_overrides=cli_args_to_config_overrides(args),
        )
    except ConfigError as e:
        LOGGER.error(str(e))
        return EXIT_INVALID_USAGE

    if args.status:
        return _handle_status(config)

    return _run_install(args, config)


if __name__ == "__main__":  # pragma: no cover - exercised via console script
    raise SystemExit(main())
