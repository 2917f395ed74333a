"""Version command implementation."""

from __future__ import annotations

from argparse import Namespace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gh_mcp.config.models import LauncherConfig

from gh_mcp.bootstrap.paths import EXTENSION_NAME
from gh_mcp.cli.commands import Command
from gh_mcp.cli.exit_codes import EXIT_SUCCESS


class VersionCommand(Command):
    """Shows the extension version."""

    def __init__(self, version: str):
        """Initialize VersionCommand.

        Args:
            version: Current version string.
        """
        self._version = version

    @property
    def name(self) -> str:
        """Command identifier."""
        return "version"

    def execute(self, args: Namespace, config: "LauncherConfig | None" = None) -> int:
        """Print ``gh-github-mcp-server v<version>``.

        Returns:
            Exit code (always 0 for version).
        """
        print(f"{EXTENSION_NAME} v{self._version}")
        return EXIT_SUCCESS
