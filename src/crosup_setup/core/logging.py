"""Logging configuration for crosup-setup.

Every module grabs a logger with ``get_logger(__name__)``. The CLI calls
``configure_logging`` once, as early as possible. On GitHub Actions,
warnings and errors are additionally rendered as workflow commands so
they show up as annotations on the run.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional, TextIO

ROOT_LOGGER_NAME = "crosup_setup"

DEFAULT_FORMAT = "%(message)s"
DEBUG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Workflow command names per level
_WORKFLOW_COMMANDS = {
    logging.WARNING: "warning",
    logging.ERROR: "error",
    logging.CRITICAL: "error",
}


def running_on_github_actions() -> bool:
    """Check whether the current process runs inside a GitHub Actions job."""
    return os.environ.get("GITHUB_ACTIONS", "").lower() == "true"


def escape_workflow_data(message: str) -> str:
    """Escape a message for use in a workflow command."""
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class WorkflowCommandFormatter(logging.Formatter):
    """Formatter that renders warnings and errors as workflow commands.

    INFO and DEBUG records are left as plain text.
    """

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        command = _WORKFLOW_COMMANDS.get(record.levelno)
        if command is None:
            return message
        return f"::{command}::{escape_workflow_data(message)}"


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the crosup_setup namespace."""
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_logging(
    debug: bool = False,
    quiet: bool = False,
    stream: Optional[TextIO] = None,
) -> None:
    """Configure the crosup_setup root logger.

    Level precedence: debug > quiet > default (INFO).
    The CI log is the only user interface of this tool, so INFO is
    shown by default.

    Args:
        debug: Enable debug logging with timestamps and logger names.
        quiet: Only show errors.
        stream: Output stream (defaults to stderr).
    """
    if debug:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.INFO

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    fmt = DEBUG_FORMAT if debug else DEFAULT_FORMAT
    if running_on_github_actions():
        handler.setFormatter(WorkflowCommandFormatter(fmt))
    else:
        handler.setFormatter(logging.Formatter(fmt))

    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
