"""Action families, one per consolidated tool."""

from dokploy_mcp.actions.application import APPLICATION_FAMILY, ApplicationAction
from dokploy_mcp.actions.database import MYSQL_FAMILY, POSTGRES_FAMILY, DatabaseAction
from dokploy_mcp.actions.project import PROJECT_FAMILY, ProjectAction

FAMILIES = (APPLICATION_FAMILY, MYSQL_FAMILY, POSTGRES_FAMILY, PROJECT_FAMILY)

__all__ = [
    "APPLICATION_FAMILY",
    "FAMILIES",
    "MYSQL_FAMILY",
    "POSTGRES_FAMILY",
    "PROJECT_FAMILY",
    "ApplicationAction",
    "DatabaseAction",
    "ProjectAction",
]
