"""
MCP server exposing Dokploy as four consolidated tools.

Tools (one per resource family, each taking {action, params}):
- dokploy_application: applications and their domains
- dokploy_mysql: MySQL databases
- dokploy_postgres: PostgreSQL databases
- dokploy_project: projects

Request flow for a tool call:

    1. EnabledToolsMiddleware drops tools not in DOKPLOY_ENABLED_TOOLS
    2. AuthMiddleware (if DOKPLOY_AUTH_ENABLED) checks the Bearer JWT scopes
    3. The tool's ActionRouter runs the project lock gate on params
    4. The router calls the Dokploy endpoint for the action
    5. The result, or any failure, comes back as a response envelope

Startup order matters: when DOKPLOY_LOCKED_PROJECT_ID is set, the locked
project is looked up in Dokploy before the server accepts any call, and the
process exits with status 1 if it doesn't exist.

Running the server:
    python -m dokploy_mcp.server

    With DOKPLOY_TRANSPORT=streamable-http it listens on http://0.0.0.0:8080:
    - MCP endpoint at /mcp
    - Health check at /health
    - Readiness check at /ready
"""

import asyncio
import logging
import sys
from typing import Any

from fastmcp import FastMCP
from mcp.types import ToolAnnotations
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from dokploy_mcp.actions import (
    APPLICATION_FAMILY,
    MYSQL_FAMILY,
    POSTGRES_FAMILY,
    PROJECT_FAMILY,
    ApplicationAction,
    DatabaseAction,
    ProjectAction,
)
from dokploy_mcp.client import DokployClient
from dokploy_mcp.config import Settings, settings
from dokploy_mcp.logs import configure_logging
from dokploy_mcp.middleware import AuthMiddleware, EnabledToolsMiddleware
from dokploy_mcp.project_lock import ProjectLock, ProjectLockConfig, ProjectLockError
from dokploy_mcp.router import build_router
from dokploy_mcp.tools import ALL_TOOL_NAMES, TOOL_SCOPE_MAP

logger = logging.getLogger("dokploy-mcp")

PARAMS_HELP = (
    "Parameters for the action. Required keys vary by action. When this server "
    "is locked to a project, projectId may be omitted and is filled in automatically."
)


def _annotations(title: str) -> ToolAnnotations:
    # Destructiveness depends on the action, so no single hint fits.
    return ToolAnnotations(
        title=title,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=True,
    )


def build_client(settings: Settings) -> DokployClient:
    return DokployClient(settings.url, settings.api_key, timeout=settings.timeout)


def build_project_lock(settings: Settings, client: DokployClient) -> ProjectLock:
    return ProjectLock(
        ProjectLockConfig.from_settings(settings),
        client,
        allow_unverified_environments=settings.lock_allow_unverified_environments,
    )


def create_server(
    settings: Settings,
    client: DokployClient | None = None,
    lock: ProjectLock | None = None,
) -> FastMCP:
    """
    Build the FastMCP server.

    Args:
        settings: Server configuration
        client: Dokploy client; built from settings when omitted
        lock: Project lock; built from settings when omitted. The caller is
              responsible for running lock.validate_locked_project() first.
    """
    client = client or build_client(settings)
    lock = lock or build_project_lock(settings, client)

    middleware = [EnabledToolsMiddleware(settings.enabled_tool_names, known=ALL_TOOL_NAMES)]
    if settings.auth_enabled:
        middleware.append(
            AuthMiddleware(settings.jwt_secret_key, settings.jwt_algorithm, TOOL_SCOPE_MAP)
        )

    mcp = FastMCP(
        name="dokploy-mcp",
        instructions=(
            "Manage a Dokploy deployment platform: projects, applications, domains, "
            "and MySQL/PostgreSQL databases. Each tool takes an action and a params "
            "object. This server may be locked to a single project."
        ),
        middleware=middleware,
    )

    application_router = build_router(APPLICATION_FAMILY, client, lock)
    mysql_router = build_router(MYSQL_FAMILY, client, lock)
    postgres_router = build_router(POSTGRES_FAMILY, client, lock)
    project_router = build_router(PROJECT_FAMILY, client, lock)

    @mcp.tool(
        name="dokploy_application",
        description=(
            "Manage Dokploy applications and their domains.\n\n"
            "APPLICATION ACTIONS:\n"
            "- create: requires name, environmentId\n"
            "- get, update, delete, deploy, redeploy, start, stop, cancelDeployment, "
            "cleanQueues, markRunning, refreshToken, disconnectGitProvider: requires applicationId\n"
            "- reload: requires applicationId, appName\n"
            "- move: requires applicationId, targetEnvironmentId\n"
            "- readAppMonitoring: requires appName\n"
            "- readTraefikConfig / updateTraefikConfig: requires applicationId (+ traefikConfig)\n"
            "- saveBuildType (buildType), saveEnvironment, saveDockerProvider, saveGitProvider, "
            "saveGithubProvider, saveGitlabProvider, saveBitbucketProvider, saveGiteaProvider: "
            "requires applicationId\n\n"
            "DOMAIN ACTIONS:\n"
            "- domainCreate: requires host, plus applicationId or composeId\n"
            "- domainGet, domainUpdate, domainDelete: requires domainId\n"
            "- domainByApplicationId: requires applicationId\n"
            "- domainByComposeId: requires composeId\n"
            "- domainGenerateDomain: requires appName\n"
            "- domainCanGenerateTraefikMeDomains: requires serverId\n"
            "- domainValidate: requires domain\n\n"
            'Example: {"action": "get", "params": {"applicationId": "app-123"}}'
        ),
        annotations=_annotations("Manage Dokploy Application"),
    )
    async def dokploy_application(
        action: ApplicationAction, params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        return await application_router.dispatch(action, params)

    @mcp.tool(
        name="dokploy_mysql",
        description=(
            "Manage Dokploy MySQL databases. Actions: create (name, appName, databaseName, "
            "databaseUser, databasePassword, databaseRootPassword, environmentId), "
            "get, update, remove, deploy, start, stop, rebuild (mysqlId), reload (mysqlId, "
            "appName), move (mysqlId, targetEnvironmentId), changeStatus (mysqlId, "
            "applicationStatus), saveEnvironment (mysqlId, env), saveExternalPort (mysqlId, "
            "externalPort)."
        ),
        annotations=_annotations("Manage Dokploy MySQL Database"),
    )
    async def dokploy_mysql(
        action: DatabaseAction, params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        return await mysql_router.dispatch(action, params)

    @mcp.tool(
        name="dokploy_postgres",
        description=(
            "Manage Dokploy PostgreSQL databases. Actions: create (name, appName, "
            "databaseName, databaseUser, databasePassword, environmentId), get, update, "
            "remove, deploy, start, stop, rebuild (postgresId), reload (postgresId, appName), "
            "move (postgresId, targetEnvironmentId), changeStatus (postgresId, "
            "applicationStatus), saveEnvironment (postgresId, env), saveExternalPort "
            "(postgresId, externalPort)."
        ),
        annotations=_annotations("Manage Dokploy PostgreSQL Database"),
    )
    async def dokploy_postgres(
        action: DatabaseAction, params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        return await postgres_router.dispatch(action, params)

    @mcp.tool(
        name="dokploy_project",
        description=(
            "Manage Dokploy projects. Actions: list, create (name), get / update / remove "
            "(projectId), duplicate (sourceEnvironmentId, name)."
        ),
        annotations=_annotations("Manage Dokploy Project"),
    )
    async def dokploy_project(
        action: ProjectAction, params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        return await project_router.dispatch(action, params)

    # Plain HTTP endpoints for Kubernetes probes. No auth: the kubelet has no token.

    @mcp.custom_route("/health", methods=["GET"])
    async def health_check(request: Request) -> Response:
        """Liveness probe: is the server process alive and responsive?"""
        return JSONResponse({"status": "healthy"})

    @mcp.custom_route("/ready", methods=["GET"])
    async def readiness_check(request: Request) -> Response:
        """Readiness probe: is the server configured to reach Dokploy?"""
        lock_status = {
            "enabled": lock.is_enabled,
            "locked_project_id": lock.locked_project_id,
        }
        if not settings.url or not settings.api_key:
            return JSONResponse(
                {
                    "status": "not_ready",
                    "reason": "DOKPLOY_URL or DOKPLOY_API_KEY missing",
                    "project_lock": lock_status,
                },
                status_code=503,
            )
        return JSONResponse({"status": "ready", "project_lock": lock_status})

    return mcp


def main() -> None:
    configure_logging(settings.log_level, settings.transport)

    client = build_client(settings)
    lock = build_project_lock(settings, client)

    try:
        asyncio.run(lock.validate_locked_project())
    except ProjectLockError as e:
        logger.error("Refusing to start: %s", e.message)
        sys.exit(1)

    mcp = create_server(settings, client=client, lock=lock)

    if settings.transport == "stdio":
        logger.info(
            "Starting Dokploy MCP server (transport=stdio, project_lock=%s)",
            lock.locked_project_id or "disabled",
        )
        mcp.run(transport="stdio")
        return

    logger.info(
        "Starting Dokploy MCP server on %s:%d (transport=streamable-http, auth=%s, project_lock=%s)",
        settings.host,
        settings.port,
        "enabled" if settings.auth_enabled else "disabled",
        lock.locked_project_id or "disabled",
    )
    mcp.run(
        transport="streamable-http",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
    )


if __name__ == "__main__":
    main()
