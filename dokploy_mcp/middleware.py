"""
FastMCP middleware controlling which tools a caller can see and call.

Two independent layers, both using FastMCP's hook system:
- EnabledToolsMiddleware applies DOKPLOY_ENABLED_TOOLS for the whole server
- AuthMiddleware (optional, HTTP only) validates a Bearer JWT and matches
  its scopes against TOOL_SCOPE_MAP

Each layer filters tools/list and also checks tools/call, so a client that
guesses a hidden tool's name is still refused. A refused call raises
PermissionError, which FastMCP returns as an MCP result with isError=true.

The project lock is not enforced here: it needs the tool's arguments and
runs inside each consolidated tool, via the action router.
"""

import logging
import uuid
from typing import Collection, Mapping, Sequence

from fastmcp.server.dependencies import get_http_request
from fastmcp.server.middleware import CallNext, Middleware, MiddlewareContext
from fastmcp.tools.tool import Tool, ToolResult
from mcp.types import CallToolRequestParams, ListToolsRequest

from dokploy_mcp.auth import AuthError, TokenInfo, validate_token

logger = logging.getLogger("dokploy-mcp.middleware")


class EnabledToolsMiddleware(Middleware):
    """
    Expose only the tools named in DOKPLOY_ENABLED_TOOLS.

    Args:
        enabled: Tool names to expose; empty exposes everything
        known: All tool names the server registers, used to warn about typos
    """

    def __init__(self, enabled: Collection[str], known: Collection[str] = ()):
        self.enabled = frozenset(enabled)

        if not self.enabled:
            logger.info("Loading all available tools")
            return

        unknown = sorted(self.enabled - set(known)) if known else []
        logger.info(
            "Filtering tools based on DOKPLOY_ENABLED_TOOLS",
            extra={
                "log_data": {
                    "enabled_tools": sorted(self.enabled),
                    "unknown_tools": unknown,
                }
            },
        )
        if unknown:
            logger.warning(
                "Tools listed in DOKPLOY_ENABLED_TOOLS were not found",
                extra={"log_data": {"unknown_tools": unknown}},
            )

    def is_enabled(self, tool_name: str) -> bool:
        return not self.enabled or tool_name in self.enabled

    async def on_list_tools(
        self,
        context: MiddlewareContext[ListToolsRequest],
        call_next: CallNext[ListToolsRequest, Sequence[Tool]],
    ) -> Sequence[Tool]:
        tools = await call_next(context)
        return [tool for tool in tools if self.is_enabled(tool.name)]

    async def on_call_tool(
        self,
        context: MiddlewareContext[CallToolRequestParams],
        call_next: CallNext[CallToolRequestParams, ToolResult],
    ) -> ToolResult:
        tool_name = context.message.name
        if not self.is_enabled(tool_name):
            logger.warning(
                "Tool call denied: tool not enabled",
                extra={"log_data": {"tool": tool_name, "decision": "denied"}},
            )
            raise PermissionError(f"Tool '{tool_name}' is not enabled on this server")
        return await call_next(context)


class AuthMiddleware(Middleware):
    """
    JWT authentication and scope-based authorization.

    Every tools/list and tools/call request is authenticated on its own,
    even within one MCP session.

    Args:
        secret_key: JWT signing key
        algorithm: JWT algorithm
        scope_map: Required scope per tool name; unmapped tools are denied
    """

    def __init__(self, secret_key: str, algorithm: str, scope_map: Mapping[str, str]):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.scope_map = dict(scope_map)

    def _get_auth_header(self) -> str | None:
        """
        Authorization header of the current HTTP request.

        Returns None when there is no HTTP request (stdio transport).
        """
        try:
            request = get_http_request()
            return request.headers.get("authorization")
        except RuntimeError:
            return None

    def _authenticate(self, request_id: str) -> TokenInfo:
        try:
            token_info = validate_token(self._get_auth_header(), self.secret_key, self.algorithm)
        except AuthError as e:
            logger.warning(
                "Authentication failed",
                extra={
                    "log_data": {
                        "request_id": request_id,
                        "decision": "rejected",
                        "reason": e.message,
                    }
                },
            )
            raise PermissionError(f"Authentication failed: {e.message}") from e

        logger.info(
            "Authentication successful",
            extra={
                "log_data": {
                    "request_id": request_id,
                    "subject": token_info.subject,
                    "scopes": token_info.scopes,
                    "decision": "authenticated",
                }
            },
        )
        return token_info

    async def on_list_tools(
        self,
        context: MiddlewareContext[ListToolsRequest],
        call_next: CallNext[ListToolsRequest, Sequence[Tool]],
    ) -> Sequence[Tool]:
        request_id = str(uuid.uuid4())[:8]
        token_info = self._authenticate(request_id)

        all_tools = await call_next(context)
        authorized_tools = [
            tool
            for tool in all_tools
            if token_info.has_scope(self.scope_map.get(tool.name))
        ]

        logger.info(
            "Tool list filtered by scope",
            extra={
                "log_data": {
                    "request_id": request_id,
                    "subject": token_info.subject,
                    "total_tools": len(all_tools),
                    "authorized_tools": [t.name for t in authorized_tools],
                    "decision": "filtered",
                }
            },
        )
        return authorized_tools

    async def on_call_tool(
        self,
        context: MiddlewareContext[CallToolRequestParams],
        call_next: CallNext[CallToolRequestParams, ToolResult],
    ) -> ToolResult:
        request_id = str(uuid.uuid4())[:8]
        tool_name = context.message.name
        token_info = self._authenticate(request_id)

        required_scope = self.scope_map.get(tool_name)
        log_data = {
            "request_id": request_id,
            "subject": token_info.subject,
            "tool": tool_name,
            "required_scope": required_scope,
        }

        if required_scope is None:
            logger.warning(
                "Tool call denied: no scope mapping found",
                extra={"log_data": {**log_data, "decision": "denied"}},
            )
            raise PermissionError(f"Access denied: tool '{tool_name}' has no scope mapping")

        if not token_info.has_scope(required_scope):
            logger.warning(
                "Tool call denied: insufficient scope",
                extra={"log_data": {**log_data, "decision": "denied"}},
            )
            raise PermissionError(
                f"Access denied: tool '{tool_name}' requires scope '{required_scope}'"
            )

        logger.info(
            "Tool call authorized",
            extra={"log_data": {**log_data, "decision": "allowed"}},
        )
        return await call_next(context)
