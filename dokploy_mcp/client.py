"""
HTTP client for the Dokploy REST API.

Dokploy exposes its procedures as flat paths under the API base URL:
reads are GET requests with query parameters (``/project.one?projectId=...``),
mutations are POST requests with a JSON body (``/application.deploy``).
Every request authenticates with the ``x-api-key`` header.

Result contract:
- A decoded JSON body is returned as-is.
- HTTP 404 or an empty body returns None ("resource absent").
- Any other failure raises DokployAPIError, so callers can always tell
  "the resource is missing" apart from "the lookup itself failed".

No retries happen here. Most Dokploy mutations (create, deploy, delete)
are not safe to repeat.
"""

import logging
from typing import Any

import httpx

logger = logging.getLogger("dokploy-mcp.client")


class DokployAPIError(Exception):
    """
    Raised when a Dokploy API call fails.

    Attributes:
        message: Human-readable description, including Dokploy's own error
                 message when the response body carries one
        status_code: HTTP status code, or None for transport failures
    """

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DokployClient:
    """
    Thin async wrapper around httpx for the Dokploy API.

    A fresh httpx.AsyncClient is opened per request, so one DokployClient can
    be shared by the startup check (its own event loop) and the MCP server.

    Args:
        base_url: Dokploy API base URL, e.g. "https://dokploy.example.com/api"
        api_key: Dokploy API key
        timeout: Per-request timeout in seconds
        transport: Optional httpx transport (tests pass an httpx.MockTransport)
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any | None:
        return await self._request("GET", path, params=params)

    async def post(self, path: str, json: dict[str, Any] | None = None) -> Any | None:
        return await self._request("POST", path, json=json or {})

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any | None:
        if not self.base_url or not self.api_key:
            raise DokployAPIError("DOKPLOY_URL and DOKPLOY_API_KEY must be set")

        url = f"{self.base_url}/{path.lstrip('/')}"
        headers = {
            "x-api-key": self.api_key,
            "Accept": "application/json",
        }

        logger.debug(
            "Dokploy API request",
            extra={"log_data": {"method": method, "path": path}},
        )

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.request(
                    method, url, headers=headers, params=params, json=json
                )
        except httpx.HTTPError as e:
            raise DokployAPIError(f"Request to {path} failed: {e}") from e

        if response.status_code == 404:
            return None

        if response.status_code >= 400:
            raise DokployAPIError(
                f"Dokploy API error ({response.status_code}) on {path}: "
                f"{_error_message(response)}",
                status_code=response.status_code,
            )

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise DokployAPIError(
                f"Dokploy API returned a non-JSON body for {path}",
                status_code=response.status_code,
            ) from e


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.text
