"""CLI runner for gh-github-mcp-server."""

from __future__ import annotations

import sys
from argparse import Namespace
from importlib.metadata import PackageNotFoundError, version
from typing import Iterable, List, Optional, Tuple

from gh_mcp.bootstrap.paths import EXTENSION_NAME
from gh_mcp.cli.arguments import build_parser, split_command
from gh_mcp.cli.commands import StdioCommand, UsageCommand, VersionCommand
from gh_mcp.cli.exit_codes import EXIT_LAUNCH_FAILURE
from gh_mcp.config import ConfigError, load_config
from gh_mcp.core.logging import configure_logging, get_logger
from gh_mcp.launcher import STDIO_COMMAND

LOGGER = get_logger(__name__)


def get_version() -> str:
    try:
        return version(EXTENSION_NAME)
    except PackageNotFoundError:
        # Fallback for editable installs that have not yet built metadata.
        from gh_mcp import __version__

        return __version__


class CLIRunner:
    """Parses arguments and dispatches to a command."""

    def __init__(self, stdio_command: Optional[StdioCommand] = None) -> None:
        self.parser = build_parser()
        self._version = get_version()
        self._stdio_command = stdio_command or StdioCommand()

    def _parse(self, argv: Optional[Iterable[str]]) -> Tuple[Optional[Namespace], List[str]]:
        argv_list = list(argv) if argv is not None else sys.argv[1:]
        launcher_argv, command, command_args = split_command(argv_list)
        try:
            args, unknown = self.parser.parse_known_args(launcher_argv)
        except SystemExit:
            # Malformed launcher options fall through to usage
            return None, argv_list

        args.command = command
        args.args = command_args
        return args, unknown

    def run(self, argv: Optional[Iterable[str]] = None) -> int:
        """Run the CLI.

        Args:
            argv: Command-line arguments (defaults to sys.argv[1:]).

        Returns:
            Exit code.
        """
        args, unknown = self._parse(argv)

        if args is None:
            configure_logging()
            return UsageCommand().execute(Namespace())

        # Configure logging as early as possible.
        configure_logging(debug=args.debug, quiet=args.quiet)

        if args.version:
            return VersionCommand(self._version).execute(args)

        if args.command != STDIO_COMMAND or unknown:
            return UsageCommand().execute(args)

        try:
            config = load_config(args.config, overrides={"version": self._version})
        except ConfigError as e:
            LOGGER.error(f"Error loading config: {e}")
            return EXIT_LAUNCH_FAILURE

        return self._stdio_command.execute(args, config)
