"""
MySQL and PostgreSQL actions behind dokploy_mysql and dokploy_postgres.

Dokploy exposes the same procedure set for both engines, differing only in
the procedure prefix and the id field (mysqlId / postgresId). MySQL also
takes a root password.
"""

from enum import Enum

from dokploy_mcp.endpoints import Endpoint
from dokploy_mcp.router import ActionFamily


class DatabaseAction(str, Enum):
    CREATE = "create"
    REMOVE = "remove"
    DEPLOY = "deploy"
    START = "start"
    STOP = "stop"
    UPDATE = "update"
    GET = "get"
    REBUILD = "rebuild"
    RELOAD = "reload"
    MOVE = "move"
    CHANGE_STATUS = "changeStatus"
    SAVE_ENVIRONMENT = "saveEnvironment"
    SAVE_EXTERNAL_PORT = "saveExternalPort"


def database_endpoints(engine: str, title: str) -> dict[DatabaseAction, Endpoint]:
    """
    Build the endpoint table for one database engine.

    Args:
        engine: Procedure prefix, "mysql" or "postgres"
        title: Display name, e.g. "MySQL"
    """
    id_field = f"{engine}Id"
    credentials = ("databaseName", "databaseUser", "databasePassword")
    if engine == "mysql":
        credentials += ("databaseRootPassword",)

    def by_id(procedure: str, verb: str, *optional: str, required: tuple[str, ...] = ()):
        return Endpoint(
            f"{engine}.{procedure}",
            f"{verb} {title} database",
            required=(id_field,) + required,
            optional=optional,
        )

    return {
        DatabaseAction.CREATE: Endpoint(
            f"{engine}.create",
            f"Create {title} database",
            required=("name", "appName") + credentials + ("environmentId",),
            optional=("dockerImage", "description", "serverId"),
        ),
        DatabaseAction.GET: Endpoint(
            f"{engine}.one", f"Get {title} database", method="GET", required=(id_field,)
        ),
        DatabaseAction.UPDATE: by_id(
            "update",
            "Update",
            "name",
            "appName",
            "description",
            "dockerImage",
            "command",
            "env",
            "memoryReservation",
            "memoryLimit",
            "cpuReservation",
            "cpuLimit",
            "externalPort",
            "applicationStatus",
            *credentials,
        ),
        DatabaseAction.REMOVE: by_id("remove", "Remove"),
        DatabaseAction.DEPLOY: by_id("deploy", "Deploy"),
        DatabaseAction.START: by_id("start", "Start"),
        DatabaseAction.STOP: by_id("stop", "Stop"),
        DatabaseAction.REBUILD: by_id("rebuild", "Rebuild"),
        DatabaseAction.RELOAD: by_id("reload", "Reload", required=("appName",)),
        DatabaseAction.MOVE: by_id("move", "Move", required=("targetEnvironmentId",)),
        DatabaseAction.CHANGE_STATUS: by_id(
            "changeStatus", "Change status of", required=("applicationStatus",)
        ),
        DatabaseAction.SAVE_ENVIRONMENT: by_id("saveEnvironment", "Save environment of", "env"),
        DatabaseAction.SAVE_EXTERNAL_PORT: by_id(
            "saveExternalPort", "Save external port of", required=("externalPort",)
        ),
    }


MYSQL_FAMILY = ActionFamily(
    name="MySQL",
    tool_name="dokploy_mysql",
    label="MySQL database",
    actions=DatabaseAction,
    endpoints=database_endpoints("mysql", "MySQL"),
)

POSTGRES_FAMILY = ActionFamily(
    name="PostgreSQL",
    tool_name="dokploy_postgres",
    label="PostgreSQL database",
    actions=DatabaseAction,
    endpoints=database_endpoints("postgres", "PostgreSQL"),
)
