"""GitHub Milestones MCP Server.

Exposes GitHub's repository milestones REST endpoints (list, get, create,
update, delete) as Model Context Protocol tools over stdio.

Run with: uvx python -m github_milestones_mcp
"""

__version__ = "1.0.0"
