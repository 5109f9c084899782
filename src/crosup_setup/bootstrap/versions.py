"""Default crosup release tag.

Reads the tag from pyproject.toml [tool.crosup_setup.tools]. The hard-coded
fallback is used when the package is installed and pyproject.toml is not
around.
"""

from __future__ import annotations

import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

# Kept in sync with pyproject.toml
_FALLBACK_VERSIONS: Dict[str, str] = {
    "crosup": "v0.4.8",
}


@lru_cache(maxsize=1)
def _load_pyproject_versions() -> Dict[str, str]:
    """Load tool versions from crosup-setup's pyproject.toml.

    Returns:
        Dictionary mapping tool names to release tags.
    """
    # Structure: src/crosup_setup/bootstrap/versions.py -> ../../../pyproject.toml
    pyproject_path = Path(__file__).parent.parent.parent.parent / "pyproject.toml"

    if not pyproject_path.exists():
        return _FALLBACK_VERSIONS.copy()

    try:
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        return _FALLBACK_VERSIONS.copy()

    versions = dict(data.get("tool", {}).get("crosup_setup", {}).get("tools", {}))

    for tool, version in _FALLBACK_VERSIONS.items():
        versions.setdefault(tool, version)

    return versions


def get_tool_version(tool_name: str, default: Optional[str] = None) -> str:
    """Get the release tag for a tool.

    Args:
        tool_name: Name of the tool (e.g., 'crosup').
        default: Optional default if the tool is not listed.

    Returns:
        Release tag string.

    Raises:
        KeyError: If tool not found and no default provided.
    """
    versions = _load_pyproject_versions()

    if tool_name in versions:
        return versions[tool_name]

    if default is not None:
        return default

    raise KeyError(f"Unknown tool: {tool_name}. Available: {list(versions.keys())}")
