"""Project actions behind the dokploy_project tool."""

from enum import Enum

from dokploy_mcp.endpoints import Endpoint
from dokploy_mcp.router import ActionFamily


class ProjectAction(str, Enum):
    LIST = "list"
    CREATE = "create"
    GET = "get"
    UPDATE = "update"
    REMOVE = "remove"
    DUPLICATE = "duplicate"


PROJECT_ENDPOINTS: dict[ProjectAction, Endpoint] = {
    ProjectAction.LIST: Endpoint("project.all", "List projects", method="GET"),
    ProjectAction.CREATE: Endpoint(
        "project.create",
        "Create project",
        required=("name",),
        optional=("description", "env"),
    ),
    ProjectAction.GET: Endpoint("project.one", "Get project", method="GET", required=("projectId",)),
    ProjectAction.UPDATE: Endpoint(
        "project.update",
        "Update project",
        required=("projectId",),
        optional=("name", "description", "env"),
    ),
    ProjectAction.REMOVE: Endpoint("project.remove", "Remove project", required=("projectId",)),
    ProjectAction.DUPLICATE: Endpoint(
        "project.duplicate",
        "Duplicate project",
        required=("sourceEnvironmentId", "name"),
        optional=("description", "includeServices", "selectedServices", "duplicateInSameProject"),
    ),
}

PROJECT_FAMILY = ActionFamily(
    name="project",
    tool_name="dokploy_project",
    label="project management",
    actions=ProjectAction,
    endpoints=PROJECT_ENDPOINTS,
)
