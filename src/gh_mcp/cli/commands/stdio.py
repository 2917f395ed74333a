"""Stdio command implementation."""

from __future__ import annotations

from argparse import Namespace
from typing import Callable, Optional

from gh_mcp.cli.commands import Command
from gh_mcp.cli.exit_codes import EXIT_LAUNCH_FAILURE
from gh_mcp.config.models import LauncherConfig
from gh_mcp.core.errors import CredentialError, HelperProcessError, LauncherError
from gh_mcp.core.logging import get_logger
from gh_mcp.launcher import SessionLauncher

LOGGER = get_logger(__name__)


def describe_failure(error: LauncherError) -> str:
    """Prefix naming the step that failed."""
    if isinstance(error, CredentialError):
        return "Error getting GitHub token"
    if isinstance(error, HelperProcessError):
        return "Error running MCP server"
    return "Error with server binary"


class StdioCommand(Command):
    """Runs the MCP server in stdio mode."""

    def __init__(
        self,
        launcher_factory: Optional[Callable[[LauncherConfig], SessionLauncher]] = None,
    ) -> None:
        self._launcher_factory = launcher_factory or SessionLauncher

    @property
    def name(self) -> str:
        """Command identifier."""
        return "stdio"

    def execute(self, args: Namespace, config: "LauncherConfig | None" = None) -> int:
        """Execute the stdio session.

        Args:
            args: Parsed arguments; ``args.args`` is forwarded to the server.
            config: Launcher configuration (defaults used if omitted).

        Returns:
            The server's exit code, or 1 if the session could not start.
        """
        launcher = self._launcher_factory(config or LauncherConfig())
        try:
            return launcher.run(list(getattr(args, "args", None) or []))
        except LauncherError as e:
            LOGGER.error(f"{describe_failure(e)}: {e}")
            if getattr(args, "debug", False):
                LOGGER.exception("Traceback:")
            return EXIT_LAUNCH_FAILURE
