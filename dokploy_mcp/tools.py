"""
Consolidated tool names and the scopes required to use them.

The MCP server registers the tool functions (in server.py); the middleware
imports TOOL_SCOPE_MAP from here to decide whether a caller's token grants
access to a given tool, and ALL_TOOL_NAMES to apply DOKPLOY_ENABLED_TOOLS.

Scope naming convention:
- Format: "<resource>:<action>" (e.g. "application:manage")
- Scopes are additive: a token with ["application:manage", "project:manage"]
  can use both tools.
"""

from dokploy_mcp.actions import FAMILIES

# Example token payloads and their tool access:
#   {"scope": ["project:manage"]}                          -> dokploy_project only
#   {"scope": ["mysql:manage", "postgres:manage"]}         -> both database tools
#   {"scope": []}                                          -> no tools
TOOL_SCOPE_MAP: dict[str, str] = {
    "dokploy_application": "application:manage",
    "dokploy_mysql": "mysql:manage",
    "dokploy_postgres": "postgres:manage",
    "dokploy_project": "project:manage",
}

ALL_TOOL_NAMES: tuple[str, ...] = tuple(family.tool_name for family in FAMILIES)
