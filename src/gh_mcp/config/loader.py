"""Configuration file loading and merging.

Handles loading configuration from YAML with:
- Explicit config path (--config) or $GH_MCP_CONFIG
- Default config (<data-dir>/config.yml)
- Environment variable expansion (${VAR}, ${VAR:-default})
- Overrides applied on top of the file
"""

from __future__ import annotations

import os
import re
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from gh_mcp.bootstrap.paths import LauncherPaths
from gh_mcp.config.models import LauncherConfig
from gh_mcp.config.validation import validate_config
from gh_mcp.core.logging import get_logger

LOGGER = get_logger(__name__)

CONFIG_PATH_ENV = "GH_MCP_CONFIG"

# Environment variable pattern: ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


class ConfigError(Exception):
    """Configuration loading or parsing error."""

    pass


def load_config(
    config_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
    paths: Optional[LauncherPaths] = None,
) -> LauncherConfig:
    """Load configuration with proper precedence.

    Precedence (highest to lowest):
    1. overrides
    2. config_path, else $GH_MCP_CONFIG, else <data-dir>/config.yml
    3. Built-in defaults

    An explicitly named file must exist; the default file is optional.

    Raises:
        ConfigError: If the file is missing (when explicit), not valid YAML,
            or contains invalid values.
    """
    merged: Dict[str, Any] = {}

    explicit = config_path
    if explicit is None and os.environ.get(CONFIG_PATH_ENV):
        explicit = Path(os.environ[CONFIG_PATH_ENV])

    if explicit is not None:
        if not explicit.is_file():
            raise ConfigError(f"Config file not found: {explicit}")
        source: Optional[Path] = explicit
    else:
        paths = paths or LauncherPaths.default()
        source = paths.config_file if paths.config_file.is_file() else None

    if source is not None:
        try:
            file_dict = load_yaml_file(source)
            validate_config(file_dict, source=str(source))
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {source}: {e}") from e
        except ValueError as e:
            raise ConfigError(str(e)) from e
        merged.update(file_dict)
        LOGGER.debug(f"Loaded config from {source}")

    if overrides:
        merged.update({k: v for k, v in overrides.items() if v is not None})

    return dict_to_config(merged)


def load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML config file.

    Performs environment variable expansion on string values.

    Raises:
        yaml.YAMLError: If YAML parsing fails.
        ConfigError: If the document is not a mapping.
    """
    with open(path, "r", encoding="utf-8") as f:
        content = f.read()

    data = yaml.safe_load(content)

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a YAML mapping, got {type(data).__name__}")

    return expand_env_vars(data)


def expand_env_vars(data: Any) -> Any:
    """Recursively expand environment variables in config values."""
    if isinstance(data, dict):
        return {k: expand_env_vars(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [expand_env_vars(item) for item in data]
    elif isinstance(data, str):
        return ENV_VAR_PATTERN.sub(_env_var_replacer, data)
    else:
        return data


def _env_var_replacer(match: re.Match[str]) -> str:
    """Replace environment variable reference with its value."""
    var_name = match.group(1)
    default_value = match.group(2)

    value = os.environ.get(var_name)
    if value is not None:
        return value
    if default_value is not None:
        return default_value

    LOGGER.warning(f"Environment variable ${var_name} is not set and has no default")
    return ""


def dict_to_config(data: Dict[str, Any]) -> LauncherConfig:
    """Convert a validated dict to a typed LauncherConfig.

    Keys that are not LauncherConfig fields are ignored; validation has
    already warned about them.
    """
    known = {f.name for f in fields(LauncherConfig)}
    values = {k: v for k, v in data.items() if k in known}
    if "request_timeout" in values:
        values["request_timeout"] = float(values["request_timeout"])
    return LauncherConfig(**values)
