"""gh-github-mcp-server - GitHub CLI extension that launches github-mcp-server."""

__version__ = "0.1.0"
