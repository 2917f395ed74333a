"""Argument parser for the gh-github-mcp-server CLI."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from gh_mcp.bootstrap.paths import EXTENSION_NAME

# Launcher options that consume the following token as their value
_OPTIONS_WITH_VALUE = frozenset({"--config"})


def split_command(argv: Sequence[str]) -> Tuple[List[str], Optional[str], List[str]]:
    """Split argv into launcher options, the command and its raw arguments.

    The command is the first token that is neither an option nor an option's
    value. Everything after it is returned untouched, including ``--`` and
    tokens that look like launcher options.

    Returns:
        ``(launcher_argv, command, command_args)``; ``command`` is None when
        argv holds only options.
    """
    argv = list(argv)
    index = 0
    while index < len(argv):
        token = argv[index]
        if token in _OPTIONS_WITH_VALUE:
            index += 2
            continue
        if not token.startswith("-") or token == "-":
            return argv[:index], token, argv[index + 1:]
        index += 1
    return argv, None, []


def build_parser() -> argparse.ArgumentParser:
    """Build the parser for the launcher options that precede the command."""
    parser = argparse.ArgumentParser(
        prog=EXTENSION_NAME,
        description="GitHub CLI extension that runs github-mcp-server.",
        add_help=False,
    )

    parser.add_argument(
        "-v",
        "--version",
        action="store_true",
        help="Show version and exit.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Only log errors.",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        type=Path,
        help="Path to config file (default: <data-dir>/config.yml).",
    )

    return parser
