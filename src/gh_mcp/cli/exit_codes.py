"""Exit codes for the gh-github-mcp-server CLI.

- 0: Success, or informational output (version/usage)
- 1: Token, binary resolution, download or server start failure

A stdio session that reaches the server exits with the server's own code.
"""

from __future__ import annotations

EXIT_SUCCESS = 0
EXIT_LAUNCH_FAILURE = 1
