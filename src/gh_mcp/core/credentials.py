"""GitHub token retrieval through the GitHub CLI."""

from __future__ import annotations

import subprocess

from gh_mcp.core.errors import CredentialError
from gh_mcp.core.logging import get_logger

LOGGER = get_logger(__name__)

GH_TOKEN_COMMAND = ["gh", "auth", "token"]


def get_github_token(timeout: float = 30) -> str:
    """Get the GitHub token from the GitHub CLI.

    Args:
        timeout: Seconds to wait for ``gh auth token``.

    Returns:
        The token with surrounding whitespace removed.

    Raises:
        CredentialError: If ``gh`` fails, is missing, or prints nothing.
    """
    LOGGER.debug(f"Running: {' '.join(GH_TOKEN_COMMAND)}")
    try:
        result = subprocess.run(
            GH_TOKEN_COMMAND,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=True,
        )
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or "").strip()
        raise CredentialError(f"failed to get GitHub token: {stderr}") from e
    except (subprocess.SubprocessError, FileNotFoundError, OSError) as e:
        raise CredentialError(f"failed to execute gh auth token: {e}") from e

    token = result.stdout.strip()
    if not token:
        raise CredentialError("received empty token from GitHub CLI")

    return token
