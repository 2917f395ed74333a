"""Usage command implementation."""

from __future__ import annotations

from argparse import Namespace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gh_mcp.config.models import LauncherConfig

from gh_mcp.cli.commands import Command
from gh_mcp.cli.exit_codes import EXIT_SUCCESS

USAGE_TEXT = """\
GitHub MCP Server CLI Extension

USAGE:
  gh github-mcp-server stdio [flags] - Start the MCP server in stdio mode

FLAGS:
  --read-only            Restrict the server to read-only operations
  --log-file string      Path to log file
  --gh-host string       Specify the GitHub hostname (for GitHub Enterprise)

This extension uses your GitHub CLI authentication
to securely communicate with GitHub APIs."""


class UsageCommand(Command):
    """Prints usage text."""

    @property
    def name(self) -> str:
        """Command identifier."""
        return "usage"

    def execute(self, args: Namespace, config: "LauncherConfig | None" = None) -> int:
        """Print usage to stdout.

        Returns:
            Exit code (always 0 for usage).
        """
        print(USAGE_TEXT)
        return EXIT_SUCCESS
