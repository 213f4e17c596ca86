"""MCP server exposing the Dokploy API as consolidated, project-lockable tools."""

__version__ = "0.1.0"
