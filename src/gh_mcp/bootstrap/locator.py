"""Locate an already-installed github-mcp-server binary."""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Iterator, Mapping, Optional, Tuple

from gh_mcp.bootstrap.paths import LauncherPaths, binary_name
from gh_mcp.bootstrap.platform import PlatformInfo, get_platform_info
from gh_mcp.config.models import SERVER_DIR_ENV, SERVER_PATH_ENV, LauncherConfig
from gh_mcp.core.logging import get_logger

LOGGER = get_logger(__name__)


def file_exists(path: Path) -> bool:
    """Check that a path exists and is not a directory."""
    try:
        return path.is_file()
    except OSError:
        return False


class BinaryLocator:
    """Searches candidate locations for the server binary.

    Candidates, highest priority first:
    1. $GITHUB_MCP_SERVER_PATH
    2. $GITHUB_MCP_SERVER_DIR/bin/<binary>
    3. <data-dir>/bin/<binary>
    4. <launcher-dir>/bin/<binary>
    5. <launcher-dir>/<binary>
    6. <binary> on PATH
    """

    def __init__(
        self,
        config: LauncherConfig,
        paths: LauncherPaths,
        platform_info: Optional[PlatformInfo] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._config = config
        self._paths = paths
        self._platform = platform_info or get_platform_info()
        self._environ = os.environ if environ is None else environ

    @property
    def file_name(self) -> str:
        return binary_name(self._config.binary_name, self._platform)

    def candidates(self) -> Iterator[Tuple[str, Path]]:
        """Yield ``(label, path)`` pairs for the fixed filesystem candidates."""
        custom_path = self._environ.get(SERVER_PATH_ENV)
        if custom_path:
            yield SERVER_PATH_ENV, Path(custom_path)

        workspace_dir = self._environ.get(SERVER_DIR_ENV)
        if workspace_dir:
            yield SERVER_DIR_ENV, Path(workspace_dir) / "bin" / self.file_name

        yield "data dir", self._paths.installed_binary(self.file_name)
        yield "launcher bin dir", self._paths.launcher_dir / "bin" / self.file_name
        yield "launcher dir", self._paths.launcher_dir / self.file_name

    def locate(self) -> Optional[Path]:
        """Return the first existing candidate, or None if all miss."""
        for label, path in self.candidates():
            if file_exists(path):
                LOGGER.debug(f"Found server binary via {label}: {path}")
                return path
            LOGGER.debug(f"No server binary via {label}: {path}")

        # which() handles PATHEXT on Windows, so pass the bare name
        found = shutil.which(self._config.binary_name)
        if found:
            LOGGER.debug(f"Found server binary on PATH: {found}")
            return Path(found)

        LOGGER.debug("Server binary not found on PATH")
        return None
