"""
Bootstrap module for github-mcp-server binary management.

This module handles:
- Platform detection (OS + architecture)
- Data directory and binary path resolution
- Locating an installed binary
- Resolving and downloading the latest release asset
"""

from gh_mcp.bootstrap.platform import get_platform_info, PlatformInfo
from gh_mcp.bootstrap.paths import binary_name, get_extension_data_dir, LauncherPaths

__all__ = [
    "get_platform_info",
    "PlatformInfo",
    "binary_name",
    "get_extension_data_dir",
    "LauncherPaths",
]
