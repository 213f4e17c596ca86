"""
Per-call enforcement of the project lock.

enforce_project_lock() is the single gate every consolidated tool call
passes before its handler runs. It reads the scoping fields out of the
call's parameter bag, applies the ProjectLock rules, and either lets the
call proceed or denies it.

Gate order (first failure wins):
    1. Lock disabled                 -> Proceed, params untouched
    2. projectId conflicts with lock -> Denied("Project lock violation")
    3. projectId missing             -> inject the locked id into params
    4. environmentId not in project  -> Denied("Environment validation failed")
    5. targetEnvironmentId not in it -> Denied("Target environment validation failed")
    6.                               -> Proceed

The injection in step 3 mutates the caller's dict in place: the handler
receives the same dict and must see the locked id.
"""

import logging
from dataclasses import dataclass
from typing import Any

from dokploy_mcp import responses
from dokploy_mcp.project_lock import ProjectLock

logger = logging.getLogger("dokploy-mcp.lock-enforcer")

PROJECT_ID = "projectId"
ENVIRONMENT_ID = "environmentId"
TARGET_ENVIRONMENT_ID = "targetEnvironmentId"


@dataclass(frozen=True)
class Proceed:
    """The call may go ahead."""


@dataclass(frozen=True)
class Denied:
    """The call is rejected before reaching Dokploy."""

    reason: str
    detail: str

    def to_response(self) -> dict[str, Any]:
        return responses.error(self.reason, self.detail)


GateResult = Proceed | Denied


@dataclass(frozen=True)
class ScopingFields:
    """The subset of a parameter bag the lock cares about."""

    project_id: str | None = None
    environment_id: str | None = None
    target_environment_id: str | None = None

    @classmethod
    def from_params(cls, params: dict[str, Any]) -> "ScopingFields":
        # Empty strings count as absent.
        return cls(
            project_id=params.get(PROJECT_ID) or None,
            environment_id=params.get(ENVIRONMENT_ID) or None,
            target_environment_id=params.get(TARGET_ENVIRONMENT_ID) or None,
        )


async def enforce_project_lock(lock: ProjectLock, params: dict[str, Any]) -> GateResult:
    """
    Apply the project lock to one call's parameters.

    Args:
        lock: The process-wide project lock
        params: The call's parameter bag; may receive an injected projectId

    Returns:
        Proceed, or Denied with a reason and a detail message
    """
    if not lock.is_enabled:
        return Proceed()

    locked_id = lock.locked_project_id
    fields = ScopingFields.from_params(params)

    if fields.project_id:
        violation = lock.validate_project_id(fields.project_id)
        if violation:
            logger.warning(
                "Project lock violation",
                extra={
                    "log_data": {
                        "locked_project_id": locked_id,
                        "project_id": fields.project_id,
                        "decision": "denied",
                    }
                },
            )
            return Denied("Project lock violation", violation)
    else:
        logger.debug(
            "Injecting locked projectId into params",
            extra={"log_data": {"locked_project_id": locked_id}},
        )
        params[PROJECT_ID] = locked_id

    if fields.environment_id:
        violation = await lock.validate_environment_belongs_to_project(fields.environment_id)
        if violation:
            logger.warning(
                "Environment validation failed",
                extra={
                    "log_data": {
                        "locked_project_id": locked_id,
                        "environment_id": fields.environment_id,
                        "decision": "denied",
                    }
                },
            )
            return Denied("Environment validation failed", violation)

    if fields.target_environment_id:
        violation = await lock.validate_environment_belongs_to_project(
            fields.target_environment_id
        )
        if violation:
            logger.warning(
                "Target environment validation failed",
                extra={
                    "log_data": {
                        "locked_project_id": locked_id,
                        "target_environment_id": fields.target_environment_id,
                        "decision": "denied",
                    }
                },
            )
            return Denied("Target environment validation failed", violation)

    return Proceed()
