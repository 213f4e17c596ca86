"""
Project lock: restrict a server instance to a single Dokploy project.

When DOKPLOY_LOCKED_PROJECT_ID is set, every consolidated tool call is
checked against that project before it reaches Dokploy:
- an explicit projectId must equal the locked id
- an environmentId (or a move's targetEnvironmentId) must belong to the
  locked project, verified by looking the project up in Dokploy

This module holds the lock configuration and the validation rules. The
per-call enforcement that applies them to a parameter bag lives in
lock_enforcer.py.

The configuration is an immutable value built once at startup and handed to
the enforcer and routers explicitly; it never changes for the life of the
process, because callers may already have acted on the effective project id.

Fail closed: if an ownership check can't be performed (Dokploy unreachable,
project missing), the call is denied. The one exception is a project
response without any environments list at all, which is let through with a
warning unless lock_allow_unverified_environments is turned off.
"""

import logging
from dataclasses import dataclass
from typing import Any, Protocol

from dokploy_mcp.config import Settings

logger = logging.getLogger("dokploy-mcp.project-lock")


class ProjectLockError(Exception):
    """
    Raised when the configured locked project is unusable.

    This is a startup failure: the server must not begin serving tool calls
    with a lock that points at a project that doesn't exist.
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ResourceDirectory(Protocol):
    """Anything that can look up Dokploy resources by path (DokployClient does)."""

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any | None: ...


@dataclass(frozen=True)
class ProjectLockConfig:
    """
    Immutable lock configuration.

    Attributes:
        locked_project_id: The project this instance is restricted to, or None
    """

    locked_project_id: str | None = None

    @property
    def is_enabled(self) -> bool:
        return bool(self.locked_project_id)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProjectLockConfig":
        # An empty variable counts as unset.
        return cls(locked_project_id=settings.locked_project_id or None)


class ProjectLock:
    """
    Validation rules for the project lock.

    Args:
        config: The lock configuration
        directory: Client used to look up the locked project
        allow_unverified_environments: Let environment checks pass when the
            locked project's response carries no environments list
    """

    def __init__(
        self,
        config: ProjectLockConfig,
        directory: ResourceDirectory,
        allow_unverified_environments: bool = True,
    ):
        self._config = config
        self._directory = directory
        self._allow_unverified_environments = allow_unverified_environments

    def get_config(self) -> ProjectLockConfig:
        return self._config

    @property
    def is_enabled(self) -> bool:
        return self._config.is_enabled

    @property
    def locked_project_id(self) -> str | None:
        return self._config.locked_project_id

    async def _fetch_locked_project(self) -> Any | None:
        return await self._directory.get(
            "project.one", {"projectId": self._config.locked_project_id}
        )

    async def validate_locked_project(self) -> None:
        """
        Check that the locked project exists in Dokploy.

        Run once at startup, before any tool call is accepted. A no-op when
        the lock is disabled.

        Raises:
            ProjectLockError: If the project is missing or the lookup fails
        """
        if not self.is_enabled:
            logger.info("Project lock is not enabled")
            return

        locked_id = self._config.locked_project_id
        logger.info(
            "Validating locked project",
            extra={"log_data": {"locked_project_id": locked_id}},
        )

        try:
            project = await self._fetch_locked_project()
            if not project:
                raise ProjectLockError(f'Project with ID "{locked_id}" not found')
        except Exception as e:
            reason = getattr(e, "message", None) or str(e) or "Unknown error"
            logger.error(
                "Failed to validate locked project",
                extra={"log_data": {"locked_project_id": locked_id, "reason": reason}},
            )
            raise ProjectLockError(
                f'Invalid DOKPLOY_LOCKED_PROJECT_ID: Project "{locked_id}" does not '
                f"exist or is not accessible. {reason}"
            ) from e

        name = project.get("name") if isinstance(project, dict) else None
        logger.info(
            "Project lock validated",
            extra={"log_data": {"locked_project_id": locked_id, "project_name": name}},
        )

    def validate_project_id(self, project_id: str | None) -> str | None:
        """
        Check an explicit projectId against the lock.

        Returns None if the check passes, or a violation message. An absent
        project_id passes: injecting the locked id is the enforcer's job.
        """
        if not self.is_enabled:
            return None

        if project_id and project_id != self._config.locked_project_id:
            return (
                "Access denied: This MCP instance is locked to project "
                f'"{self._config.locked_project_id}"'
            )

        return None

    async def validate_environment_belongs_to_project(
        self, environment_id: str
    ) -> str | None:
        """
        Check that an environment belongs to the locked project.

        Looks the locked project up in Dokploy on every call; environment
        membership can change while the server runs.

        Returns None if the check passes, or a violation message.
        """
        if not self.is_enabled:
            return None

        locked_id = self._config.locked_project_id

        try:
            project = await self._fetch_locked_project()
        except Exception as e:
            reason = getattr(e, "message", None) or str(e) or "Unknown error"
            logger.error(
                "Failed to validate environment",
                extra={"log_data": {"environment_id": environment_id, "reason": reason}},
            )
            return f"Failed to validate environment: {reason}"

        if not project:
            return f'Locked project "{locked_id}" not found'

        environments = project.get("environments") if isinstance(project, dict) else None

        if not isinstance(environments, list):
            if not self._allow_unverified_environments:
                return (
                    f'Cannot verify that environment "{environment_id}" belongs to '
                    f'locked project "{locked_id}"'
                )
            logger.warning(
                "Cannot verify environment ownership, allowing operation",
                extra={
                    "log_data": {
                        "locked_project_id": locked_id,
                        "environment_id": environment_id,
                    }
                },
            )
            return None

        # Dokploy has returned environments keyed both ways across versions.
        belongs = any(
            isinstance(env, dict)
            and environment_id in (env.get("id"), env.get("environmentId"))
            for env in environments
        )
        if not belongs:
            return (
                f'Access denied: Environment "{environment_id}" does not belong to '
                f'locked project "{locked_id}"'
            )

        return None

    def effective_project_id(self, project_id: str | None = None) -> str | None:
        """The locked project id when the lock is on, otherwise project_id."""
        if self.is_enabled:
            return self._config.locked_project_id
        return project_id
