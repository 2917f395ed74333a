"""Error types raised while resolving and launching the server binary.

Every failure aborts the run; nothing here is retried. The CLI runner is
the only place these are caught.
"""

from __future__ import annotations

from typing import Optional


class LauncherError(Exception):
    """Base class for launcher failures."""


class CredentialError(LauncherError):
    """The GitHub CLI failed to produce a token."""


class NetworkError(LauncherError):
    """Transport failure or unexpected HTTP status."""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        body: str = "",
    ) -> None:
        super().__init__(message)
        self.status = status
        self.body = body


class ReleaseParseError(LauncherError):
    """The release listing could not be parsed."""


class NoMatchingAssetError(LauncherError):
    """No release asset matched the current OS/architecture."""


class ArchiveError(LauncherError):
    """The server binary could not be extracted from the downloaded archive."""


class FilesystemError(LauncherError):
    """Directory creation, rename or permission change failed."""


class HelperProcessError(LauncherError):
    """The server binary could not be started."""
