"""Path management for the extension data directory.

Directory structure:
    <data-home>/gh-github-mcp-server/
        bin/
            github-mcp-server[.exe]   - Downloaded server binary
        config.yml                    - Optional launcher configuration

``<data-home>`` is ``$XDG_DATA_HOME`` when set, otherwise the platform
convention (``AppData/Local`` on Windows, ``Library/Application Support``
on macOS, ``~/.local/share`` elsewhere).
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, Mapping, Optional

from gh_mcp.bootstrap.platform import PlatformInfo, get_platform_info

EXTENSION_NAME = "gh-github-mcp-server"

# Environment variable overriding the data home
XDG_DATA_HOME_ENV = "XDG_DATA_HOME"


def binary_name(base_name: str, platform_info: Optional[PlatformInfo] = None) -> str:
    """Return the platform-specific file name for a binary."""
    platform_info = platform_info or get_platform_info()
    if platform_info.is_windows:
        return f"{base_name}.exe"
    return base_name


def get_home_dir() -> Optional[Path]:
    """Return the user's home directory, or None if it cannot be determined."""
    # expanduser leaves "~" untouched when no home is known
    home = os.path.expanduser("~")
    if home.startswith("~"):
        return None
    return Path(home)


def get_data_home(
    platform_info: Optional[PlatformInfo] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Optional[Path]:
    """Get the directory under which per-extension data dirs live.

    Returns None if neither $XDG_DATA_HOME nor the user's home is available.
    """
    environ = os.environ if environ is None else environ
    xdg_data_home = environ.get(XDG_DATA_HOME_ENV)
    if xdg_data_home:
        return Path(xdg_data_home)

    home = get_home_dir()
    if home is None:
        return None

    platform_info = platform_info or get_platform_info()
    if platform_info.is_windows:
        return home / "AppData" / "Local"
    if platform_info.is_macos:
        return home / "Library" / "Application Support"
    return home / ".local" / "share"


def get_extension_data_dir(
    platform_info: Optional[PlatformInfo] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Path:
    """Get the data directory for this extension.

    Resolution order:
    1. $XDG_DATA_HOME/gh-github-mcp-server
    2. Platform-conventional data home + gh-github-mcp-server
    3. Current directory, if no home directory is available
    """
    data_home = get_data_home(platform_info, environ)
    if data_home is None:
        return Path(".")
    return data_home / EXTENSION_NAME


def get_launcher_dir() -> Path:
    """Directory containing the running launcher script."""
    return Path(sys.argv[0]).resolve().parent


@dataclass
class LauncherPaths:
    """Paths used to find and install the server binary."""

    data_dir: Path
    launcher_dir: Path

    _BIN_DIR: ClassVar[str] = "bin"
    _CONFIG_FILE: ClassVar[str] = "config.yml"

    @classmethod
    def default(cls, platform_info: Optional[PlatformInfo] = None) -> "LauncherPaths":
        """Create paths for the current user and launcher location."""
        return cls(
            data_dir=get_extension_data_dir(platform_info),
            launcher_dir=get_launcher_dir(),
        )

    @property
    def bin_dir(self) -> Path:
        """Directory the server binary is installed into."""
        return self.data_dir / self._BIN_DIR

    @property
    def config_file(self) -> Path:
        """Default location of the launcher config file."""
        return self.data_dir / self._CONFIG_FILE

    def installed_binary(self, file_name: str) -> Path:
        """Standard install location for a binary file name."""
        return self.bin_dir / file_name
