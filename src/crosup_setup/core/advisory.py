"""Advisory operations: failures are logged, never raised."""

from __future__ import annotations

from typing import Any, Callable

from crosup_setup.core.logging import get_logger

LOGGER = get_logger(__name__)


def run_advisory(
    description: str,
    func: Callable[..., Any],
    *args: Any,
    **kwargs: Any,
) -> bool:
    """Run ``func`` and downgrade any failure to a warning.

    Args:
        description: What the operation does, used in the warning
            ("save crosup to the cache").
        func: Callable to run.
        *args: Positional arguments for func.
        **kwargs: Keyword arguments for func.

    Returns:
        True if func completed, False if it raised.
    """
    try:
        func(*args, **kwargs)
    except Exception as e:
        LOGGER.warning(f"Failed to {description}: {e}")
        return False
    return True
