"""Logging configuration for gh-github-mcp-server.

All output goes to stderr so stdout stays reserved for the MCP stdio
session that the helper binary speaks.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

ROOT_LOGGER_NAME = "gh_mcp"

_PLAIN_FORMAT = "%(message)s"
_DEBUG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"

_handler: Optional[logging.Handler] = None


def get_logger(name: str) -> logging.Logger:
    """Return a logger nested under the package root logger.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        Logger instance.
    """
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_logging(
    debug: bool = False,
    quiet: bool = False,
) -> None:
    """Configure the package logger.

    Progress messages are shown at INFO by default. ``debug`` wins over
    ``quiet`` when both are given.

    Args:
        debug: Enable debug output with level and logger names.
        quiet: Only report errors.
    """
    global _handler

    if debug:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.INFO

    root = logging.getLogger(ROOT_LOGGER_NAME)
    if _handler is not None:
        root.removeHandler(_handler)

    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(logging.Formatter(_DEBUG_FORMAT if debug else _PLAIN_FORMAT))
    root.addHandler(_handler)
    root.setLevel(level)
    root.propagate = False
