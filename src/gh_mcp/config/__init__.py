"""Configuration for gh-github-mcp-server.

Settings come from an optional YAML file and are represented by the
LauncherConfig dataclass.
"""

from gh_mcp.config.loader import ConfigError, load_config
from gh_mcp.config.models import LauncherConfig

__all__ = [
    "ConfigError",
    "LauncherConfig",
    "load_config",
]
