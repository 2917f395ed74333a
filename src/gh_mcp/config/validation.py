"""Configuration validation for gh-github-mcp-server.

Unknown keys produce warnings (with a suggestion when a close match
exists). Values of the wrong type are errors.
"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import get_close_matches
from typing import Any, Dict, List, Optional, Set, Tuple, Type

from gh_mcp.core.logging import get_logger

LOGGER = get_logger(__name__)

# Keys accepted in config.yml and the types allowed for each
VALID_KEYS: Dict[str, Tuple[Type[Any], ...]] = {
    "release_api_url": (str,),
    "request_timeout": (int, float),
    "binary_name": (str,),
    "token_env_var": (str,),
}


@dataclass
class ConfigValidationWarning:
    """A validation warning for configuration."""

    message: str
    source: str
    suggestion: Optional[str] = None

    def __str__(self) -> str:
        text = f"{self.source}: {self.message}"
        if self.suggestion:
            text += f" (did you mean '{self.suggestion}'?)"
        return text


def _suggest(key: str, valid: Set[str]) -> Optional[str]:
    matches = get_close_matches(key, sorted(valid), n=1, cutoff=0.6)
    return matches[0] if matches else None


def validate_config(data: Dict[str, Any], source: str) -> List[ConfigValidationWarning]:
    """Validate a parsed config mapping.

    Args:
        data: Parsed YAML mapping.
        source: File name used in messages.

    Returns:
        Warnings for unknown keys. Each is also logged.

    Raises:
        ValueError: If a known key has a value of the wrong type.
    """
    warnings: List[ConfigValidationWarning] = []
    valid = set(VALID_KEYS)

    for key, value in data.items():
        if key not in VALID_KEYS:
            warning = ConfigValidationWarning(
                message=f"Unknown config key '{key}'",
                source=source,
                suggestion=_suggest(str(key), valid),
            )
            LOGGER.warning(str(warning))
            warnings.append(warning)
            continue

        allowed = VALID_KEYS[key]
        # bool is an int subclass; a timeout of "true" is a mistake
        if isinstance(value, bool) or not isinstance(value, allowed):
            names = " or ".join(t.__name__ for t in allowed)
            raise ValueError(
                f"{source}: '{key}' must be {names}, got {type(value).__name__}"
            )

    timeout = data.get("request_timeout")
    if timeout is not None and timeout <= 0:
        raise ValueError(f"{source}: 'request_timeout' must be positive")

    return warnings
