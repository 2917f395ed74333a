"""Platform detection for release asset selection.

Identifiers follow the naming used by github-mcp-server release assets
(Go's GOOS/GOARCH): ``darwin``/``linux``/``windows`` and
``amd64``/``arm64``/``386``/``arm``.
"""

from __future__ import annotations

import platform
import sys
from dataclasses import dataclass
from typing import Dict, Optional

_OS_ALIASES: Dict[str, str] = {
    "darwin": "darwin",
    "linux": "linux",
    "win32": "windows",
    "cygwin": "windows",
    "windows": "windows",
}

_ARCH_ALIASES: Dict[str, str] = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "x64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv8l": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "armv6l": "arm",
    "armv7l": "arm",
}


@dataclass(frozen=True)
class PlatformInfo:
    """Operating system and CPU architecture of the running host."""

    os: str
    arch: str

    @property
    def is_windows(self) -> bool:
        return self.os == "windows"

    @property
    def is_macos(self) -> bool:
        return self.os == "darwin"

    def __str__(self) -> str:
        return f"{self.os}/{self.arch}"


def normalize_os(value: str) -> str:
    """Map a ``sys.platform`` value to a release OS identifier."""
    key = value.lower()
    if key.startswith("linux"):
        return "linux"
    return _OS_ALIASES.get(key, key)


def normalize_arch(value: str) -> str:
    """Map a ``platform.machine()`` value to a release arch identifier."""
    key = value.lower()
    return _ARCH_ALIASES.get(key, key)


def get_platform_info(
    system: Optional[str] = None,
    machine: Optional[str] = None,
) -> PlatformInfo:
    """Detect the current platform.

    Args:
        system: Override for ``sys.platform``.
        machine: Override for ``platform.machine()``.

    Returns:
        PlatformInfo with normalized identifiers.
    """
    return PlatformInfo(
        os=normalize_os(system if system is not None else sys.platform),
        arch=normalize_arch(machine if machine is not None else platform.machine()),
    )
