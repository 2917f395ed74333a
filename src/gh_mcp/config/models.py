"""Configuration data models for gh-github-mcp-server."""

from __future__ import annotations

from dataclasses import dataclass

from gh_mcp.bootstrap.paths import EXTENSION_NAME

DEFAULT_RELEASE_API_URL = (
    "https://api.github.com/repos/github/github-mcp-server/releases/latest"
)
DEFAULT_BINARY_NAME = "github-mcp-server"
DEFAULT_TOKEN_ENV_VAR = "GITHUB_PERSONAL_ACCESS_TOKEN"
DEFAULT_REQUEST_TIMEOUT = 30.0

# Environment variables used to locate a pre-installed binary
SERVER_PATH_ENV = "GITHUB_MCP_SERVER_PATH"
SERVER_DIR_ENV = "GITHUB_MCP_SERVER_DIR"


@dataclass
class LauncherConfig:
    """Launcher configuration.

    Passed explicitly to the resolver and launcher so tests can point
    ``release_api_url`` at a local endpoint.
    """

    release_api_url: str = DEFAULT_RELEASE_API_URL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT  # seconds, per HTTP request
    binary_name: str = DEFAULT_BINARY_NAME  # without platform suffix
    token_env_var: str = DEFAULT_TOKEN_ENV_VAR
    version: str = "dev"
    extension_name: str = EXTENSION_NAME

    @property
    def user_agent(self) -> str:
        return f"{self.extension_name}/{self.version}"
