"""
Action routing for consolidated tools.

A consolidated tool (e.g. dokploy_mysql) takes an `action` and a `params`
bag. Its ActionRouter:
1. runs the project lock gate on params (denial returns immediately)
2. resolves the action to its endpoint
3. calls the endpoint and turns any exception into an error envelope

The gate always runs before the action is even looked up, so no action can
reach Dokploy without passing the lock.

Each family's actions are a closed Enum. ActionFamily refuses to build
unless every member has an endpoint, so a valid action can never miss a
handler at runtime; the "Invalid action" branch only serves raw input that
didn't go through the tool schema.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import Any, Awaitable, Callable, Mapping

from dokploy_mcp import responses
from dokploy_mcp.client import DokployClient
from dokploy_mcp.endpoints import Endpoint
from dokploy_mcp.lock_enforcer import Denied, enforce_project_lock
from dokploy_mcp.project_lock import ProjectLock

logger = logging.getLogger("dokploy-mcp.router")

Handler = Callable[[dict[str, Any]], Awaitable[dict[str, Any]]]


@dataclass(frozen=True)
class ActionFamily:
    """
    The static description of one consolidated tool.

    Attributes:
        name: Short family name used in messages ("application", "mysql")
        tool_name: MCP tool name ("dokploy_application")
        label: What the family manages, for "not supported for ..." messages
        actions: Enum of every action the tool accepts
        endpoints: Endpoint for each action
    """

    name: str
    tool_name: str
    label: str
    actions: type[Enum]
    endpoints: Mapping[Enum, Endpoint]

    def __post_init__(self):
        missing = [member.value for member in self.actions if member not in self.endpoints]
        if missing:
            raise ValueError(f"{self.tool_name} has no endpoint for: {', '.join(missing)}")
        extra = [key for key in self.endpoints if not isinstance(key, self.actions)]
        if extra:
            raise ValueError(f"{self.tool_name} maps unknown actions: {extra}")

    def bind(self, client: DokployClient) -> dict[Enum, Handler]:
        """Attach a client to every endpoint, giving params-only handlers."""
        return {action: partial(endpoint, client) for action, endpoint in self.endpoints.items()}


class ActionRouter:
    """
    Dispatches one family's actions behind the project lock.

    Args:
        family: The family description
        handlers: Handler per action (normally family.bind(client))
        lock: The process-wide project lock
    """

    def __init__(
        self,
        family: ActionFamily,
        handlers: Mapping[Enum, Handler],
        lock: ProjectLock,
    ):
        self.family = family
        self._handlers = dict(handlers)
        self._lock = lock

    async def dispatch(
        self, action: str | Enum, params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        if params is None:
            params = {}

        gate = await enforce_project_lock(self._lock, params)
        if isinstance(gate, Denied):
            return gate.to_response()

        action_name = action.value if isinstance(action, Enum) else action
        try:
            member = self.family.actions(action_name)
        except ValueError:
            logger.warning(
                "Unsupported action",
                extra={"log_data": {"tool": self.family.tool_name, "action": action_name}},
            )
            return responses.error(
                "Invalid action",
                f'Action "{action_name}" is not supported for {self.family.label}',
            )

        handler = self._handlers[member]

        try:
            return await handler(params)
        except Exception as e:
            message = getattr(e, "message", None) or str(e) or "Unknown error"
            logger.error(
                "Action failed",
                extra={
                    "log_data": {
                        "tool": self.family.tool_name,
                        "action": action_name,
                        "error": message,
                    }
                },
            )
            return responses.error(
                f'Failed to execute {self.family.name} action "{action_name}"', message
            )


def build_router(family: ActionFamily, client: DokployClient, lock: ProjectLock) -> ActionRouter:
    return ActionRouter(family, family.bind(client), lock)
