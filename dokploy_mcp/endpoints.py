"""
Declarative wrappers for individual Dokploy API procedures.

Each Endpoint describes one procedure (name, HTTP method, accepted fields)
and knows how to call it and format the result. Consolidated tools map
their actions onto these.

Calling an endpoint:
1. The parameter bag is validated into a per-endpoint pydantic model.
   Required id fields must be non-empty strings. Keys the procedure does
   not accept (like a projectId injected by the project lock) are dropped.
2. One GET (query string) or POST (JSON body) request is made.
3. A GET that finds nothing is reported as an error; anything else is
   wrapped in a success envelope.

Transport failures (DokployAPIError) are not caught here; the action
router catches and formats them.
"""

import logging
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, StringConstraints, ValidationError, create_model

from dokploy_mcp import responses
from dokploy_mcp.client import DokployClient

logger = logging.getLogger("dokploy-mcp.endpoints")

NonEmptyStr = Annotated[str, StringConstraints(min_length=1)]

# Required fields are non-empty strings unless listed here.
FIELD_TYPES: dict[str, Any] = {
    "externalPort": int | None,
    "env": str | None,
    "traefikConfig": str,
    "buildArgs": str | None,
}


class Endpoint:
    """
    One Dokploy API procedure.

    Args:
        procedure: Procedure path, e.g. "application.one"
        title: Short human description, e.g. "Get application"
        method: "GET" for reads, "POST" for mutations
        required: Fields the caller must supply
        optional: Fields passed through when supplied
    """

    def __init__(
        self,
        procedure: str,
        title: str,
        method: Literal["GET", "POST"] = "POST",
        required: tuple[str, ...] = (),
        optional: tuple[str, ...] = (),
    ):
        self.procedure = procedure
        self.title = title
        self.method = method
        self.required = required
        self.optional = optional
        self.request_model = self._build_request_model()

    def __repr__(self) -> str:
        return f"Endpoint({self.procedure!r}, method={self.method!r})"

    def _build_request_model(self) -> type[BaseModel]:
        fields: dict[str, Any] = {}
        for name in self.required:
            fields[name] = (FIELD_TYPES.get(name, NonEmptyStr), ...)
        for name in self.optional:
            fields[name] = (Any, None)

        model_name = "".join(part[:1].upper() + part[1:] for part in self.procedure.split("."))
        return create_model(
            f"{model_name}Request",
            __config__=ConfigDict(extra="ignore"),
            **fields,
        )

    def parse(self, params: dict[str, Any]) -> dict[str, Any]:
        """
        Validate params and return only the fields this procedure accepts.

        Raises:
            pydantic.ValidationError: If a required field is missing or invalid
        """
        request = self.request_model.model_validate(params)
        return request.model_dump(exclude_unset=True)

    async def __call__(self, client: DokployClient, params: dict[str, Any]) -> dict[str, Any]:
        try:
            payload = self.parse(params)
        except ValidationError as e:
            return responses.error(f"Invalid parameters for {self.title}", _describe(e))

        logger.info(
            "Calling Dokploy procedure",
            extra={"log_data": {"procedure": self.procedure, "method": self.method}},
        )

        if self.method == "GET":
            result = await client.get(self.procedure, payload)
            if result is None:
                lookup = ", ".join(f'{key}="{value}"' for key, value in payload.items())
                return responses.error(
                    f"Failed to {self.title.lower()}",
                    f"Nothing found for {self.procedure}" + (f" ({lookup})" if lookup else ""),
                )
        else:
            result = await client.post(self.procedure, payload)

        return responses.success(f"{self.title} succeeded", result)


def _describe(error: ValidationError) -> str:
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "params"
        problems.append(f"{location}: {item['msg']}")
    return "; ".join(problems)
