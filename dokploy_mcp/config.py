"""
Application configuration loaded from environment variables.

Uses pydantic-settings to define typed configuration that automatically reads
from environment variables. All config comes from the environment, never
hardcoded in source code.

Every variable carries the DOKPLOY_ prefix:
- DOKPLOY_URL, DOKPLOY_API_KEY point the server at a Dokploy instance
- DOKPLOY_LOCKED_PROJECT_ID restricts the whole server to one project
- DOKPLOY_ENABLED_TOOLS limits which consolidated tools are exposed

Locally, you can set them via environment variables or a .env file.
"""

from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Server configuration with environment variable bindings.

    Each field maps to an environment variable with the DOKPLOY_ prefix.
    For example, `url` reads from DOKPLOY_URL, `locked_project_id` reads
    from DOKPLOY_LOCKED_PROJECT_ID.
    """

    # --- Dokploy API ---

    # Base URL of the Dokploy API, including the /api suffix
    # (e.g. "https://dokploy.example.com/api").
    url: str = ""

    # API key generated in the Dokploy dashboard. Sent as the x-api-key header.
    api_key: str = ""

    # Timeout in seconds for every outbound call.
    timeout: float = 30.0

    # --- Project lock ---

    # When set, this server instance only operates on this project. Every
    # consolidated tool call is checked against it before it runs.
    # Empty or unset disables the lock.
    locked_project_id: str | None = None

    # When the locked project's API response carries no environments list,
    # environment ownership can't be checked. True lets such calls through
    # with a warning; False denies them.
    lock_allow_unverified_environments: bool = True

    # --- Tool exposure ---

    # Comma-separated list of consolidated tool names to expose
    # (e.g. "dokploy_application,dokploy_project"). Empty exposes all tools.
    enabled_tools: str = ""

    # --- Server settings ---

    # "stdio" for local agent integrations, "streamable-http" for a network service.
    transport: Literal["stdio", "streamable-http"] = "stdio"

    # Only used by the streamable-http transport.
    host: str = "0.0.0.0"
    port: int = 8080

    # Logging verbosity. Maps to Python's logging levels.
    log_level: str = "info"

    # --- Authentication (streamable-http only) ---

    # When enabled, every MCP request must carry a valid Bearer JWT.
    # The stdio transport has no HTTP headers, so leave this off there.
    auth_enabled: bool = False

    # Default is for local development only - NEVER use this in production.
    jwt_secret_key: str = "dev-secret-change-me"
    jwt_algorithm: str = "HS256"

    model_config = {
        "env_prefix": "DOKPLOY_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def enabled_tool_names(self) -> list[str]:
        """Parsed DOKPLOY_ENABLED_TOOLS; an empty list means "all tools"."""
        return [name.strip() for name in self.enabled_tools.split(",") if name.strip()]


# Singleton instance: import this from other modules.
# Created once at module load time, reads environment variables immediately.
settings = Settings()
