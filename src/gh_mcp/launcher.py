"""Start a github-mcp-server stdio session with the user's GitHub token."""

from __future__ import annotations

import os
import signal
import subprocess
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from gh_mcp.bootstrap.download import fetch_and_install
from gh_mcp.bootstrap.locator import BinaryLocator
from gh_mcp.bootstrap.paths import LauncherPaths, binary_name
from gh_mcp.bootstrap.platform import PlatformInfo, get_platform_info
from gh_mcp.bootstrap.release import ReleaseResolver, TokenProvider
from gh_mcp.config.models import LauncherConfig
from gh_mcp.core.credentials import get_github_token
from gh_mcp.core.errors import HelperProcessError
from gh_mcp.core.logging import get_logger

LOGGER = get_logger(__name__)

STDIO_COMMAND = "stdio"


def ensure_server_binary(
    config: LauncherConfig,
    paths: LauncherPaths,
    platform_info: Optional[PlatformInfo] = None,
    token_provider: Optional[TokenProvider] = None,
) -> Path:
    """Find the server binary, downloading the latest release if needed.

    Raises:
        LauncherError: Any resolution, download or install failure.
    """
    platform_info = platform_info or get_platform_info()

    locator = BinaryLocator(config, paths, platform_info)
    found = locator.locate()
    if found is not None:
        return found

    LOGGER.info(f"{config.binary_name} binary not found, downloading...")

    resolver = ReleaseResolver(config, platform_info, token_provider=token_provider)
    asset_url = resolver.resolve_asset_url()

    return fetch_and_install(
        asset_url,
        paths,
        binary_file=binary_name(config.binary_name, platform_info),
        member_hint=config.binary_name,
        timeout=config.request_timeout,
        headers={"User-Agent": config.user_agent},
    )


def exit_code_from_returncode(returncode: int) -> int:
    """Map a child return code to this process's exit code.

    A child killed by signal N reports -N; shells report that as 128 + N.
    """
    if returncode < 0:
        return 128 - returncode
    return returncode


class SessionLauncher:
    """Runs ``<server> stdio [args...]`` with stdio passed straight through."""

    def __init__(
        self,
        config: LauncherConfig,
        paths: Optional[LauncherPaths] = None,
        platform_info: Optional[PlatformInfo] = None,
        token_fetcher: Callable[[], str] = get_github_token,
    ) -> None:
        self._config = config
        self._platform = platform_info or get_platform_info()
        self._paths = paths or LauncherPaths.default(self._platform)
        self._token_fetcher = token_fetcher

    def build_command(self, server_path: Path, extra_args: Sequence[str]) -> List[str]:
        return [str(server_path), STDIO_COMMAND, *extra_args]

    def build_env(self, token: str) -> Dict[str, str]:
        env = dict(os.environ)
        env[self._config.token_env_var] = token
        return env

    def run(self, extra_args: Sequence[str] = ()) -> int:
        """Resolve the binary and run the session until the server exits.

        Args:
            extra_args: Arguments that followed ``stdio`` on the command line.

        Returns:
            The server's exit code.

        Raises:
            CredentialError: No token could be obtained; nothing is spawned.
            LauncherError: Binary resolution or download failed.
            HelperProcessError: The server could not be started.
        """
        token = self._token_fetcher()

        server_path = ensure_server_binary(
            self._config,
            self._paths,
            self._platform,
            token_provider=lambda: token,
        )
        LOGGER.info(f"Using server binary: {server_path}")

        cmd = self.build_command(server_path, extra_args)
        LOGGER.debug(f"Running: {' '.join(cmd)}")

        try:
            # stdin/stdout/stderr are inherited so the MCP stream is not buffered here
            result = subprocess.run(cmd, env=self.build_env(token), check=False)
        except OSError as e:
            raise HelperProcessError(f"failed to start {server_path}: {e}") from e

        if result.returncode != 0:
            if result.returncode < 0:
                try:
                    reason = f"terminated by {signal.Signals(-result.returncode).name}"
                except ValueError:
                    reason = f"terminated by signal {-result.returncode}"
            else:
                reason = f"exit status {result.returncode}"
            LOGGER.error(f"MCP server exited with {reason}")

        return exit_code_from_returncode(result.returncode)
