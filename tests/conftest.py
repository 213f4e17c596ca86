"""
Shared test fixtures.

Key fixtures:
- make_token / make_auth_header: mint JWTs with arbitrary claims
- fake_dokploy: an in-memory Dokploy API behind httpx.MockTransport
- make_settings: Settings with test defaults and no .env file
- make_lock: a ProjectLock over a FakeDirectory

Testing approach:
- test_project_lock.py, test_lock_enforcer.py: lock rules and the gate,
  using FakeDirectory so lookups and their failures are fully scripted
- test_client.py, test_endpoints.py, test_router.py: the API client, the
  endpoint wrappers and the action router against fake_dokploy
- test_tools.py: the full MCP server over HTTP, in-memory via ASGI
"""

import datetime
import json
from typing import Any

import httpx
import jwt
import pytest

from dokploy_mcp.client import DokployClient
from dokploy_mcp.config import Settings
from dokploy_mcp.project_lock import ProjectLock, ProjectLockConfig

TEST_SECRET = "test-secret"
TEST_ALGORITHM = "HS256"
DOKPLOY_URL = "https://dokploy.test/api"
DOKPLOY_API_KEY = "test-api-key"


class FakeDirectory:
    """
    Scripted stand-in for the Dokploy client's get().

    Args:
        responses: Result per procedure path; missing paths return None
        error: If set, every call raises it
    """

    def __init__(self, responses: dict[str, Any] | None = None, error: Exception | None = None):
        self.responses = responses or {}
        self.error = error
        self.calls: list[tuple[str, dict]] = []

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any | None:
        self.calls.append((path, dict(params or {})))
        if self.error:
            raise self.error
        return self.responses.get(path)


class FakeDokploy:
    """
    In-memory Dokploy API.

    Register canned responses per procedure with add(); unknown procedures
    answer 404. Every request is recorded for assertions.
    """

    def __init__(self):
        self.routes: dict[str, tuple[int, Any]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, procedure: str, body: Any = None, status: int = 200) -> None:
        self.routes[procedure] = (status, body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        procedure = request.url.path.rsplit("/", 1)[-1]
        if procedure not in self.routes:
            return httpx.Response(404, json={"message": f"{procedure} not found"})
        status, body = self.routes[procedure]
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    def client(self) -> DokployClient:
        return DokployClient(
            DOKPLOY_URL, DOKPLOY_API_KEY, transport=httpx.MockTransport(self.handler)
        )

    def calls(self, procedure: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith(f"/{procedure}")]

    @staticmethod
    def body(request: httpx.Request) -> dict:
        return json.loads(request.content) if request.content else {}


@pytest.fixture
def fake_dokploy() -> FakeDokploy:
    return FakeDokploy()


@pytest.fixture
def make_settings():
    """Settings with test defaults; keyword arguments override fields."""

    def _make_settings(**overrides) -> Settings:
        values = {
            "url": DOKPLOY_URL,
            "api_key": DOKPLOY_API_KEY,
            "locked_project_id": None,
            "enabled_tools": "",
            "auth_enabled": False,
            "jwt_secret_key": TEST_SECRET,
            "jwt_algorithm": TEST_ALGORITHM,
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make_settings


@pytest.fixture
def make_directory():
    """Factory for FakeDirectory (responses=..., error=...)."""
    return FakeDirectory


@pytest.fixture
def make_lock():
    """Factory for a ProjectLock over a FakeDirectory."""

    def _make_lock(
        locked_project_id: str | None = None,
        directory: FakeDirectory | None = None,
        allow_unverified_environments: bool = True,
    ) -> ProjectLock:
        return ProjectLock(
            ProjectLockConfig(locked_project_id=locked_project_id),
            directory or FakeDirectory(),
            allow_unverified_environments=allow_unverified_environments,
        )

    return _make_lock


@pytest.fixture
def make_token():
    """
    Factory fixture to generate JWT tokens for testing.

    Usage in tests:
        def test_something(make_token):
            token = make_token(sub="alice", scopes=["project:manage"])
    """

    def _make_token(
        sub: str = "test-user",
        scopes: list[str] | None = None,
        secret: str = TEST_SECRET,
        algorithm: str = TEST_ALGORITHM,
        exp_hours: float = 1.0,
        extra_claims: dict | None = None,
        include_exp: bool = True,
        include_sub: bool = True,
    ) -> str:
        now = datetime.datetime.now(datetime.timezone.utc)
        payload: dict = {"iat": now}

        if include_sub:
            payload["sub"] = sub

        if scopes is not None:
            payload["scope"] = scopes

        if include_exp:
            payload["exp"] = now + datetime.timedelta(hours=exp_hours)

        if extra_claims:
            payload.update(extra_claims)

        return jwt.encode(payload, secret, algorithm=algorithm)

    return _make_token


@pytest.fixture
def make_auth_header(make_token):
    """Convenience fixture that returns a full "Bearer <token>" string."""

    def _make_auth_header(**kwargs) -> str:
        return f"Bearer {make_token(**kwargs)}"

    return _make_auth_header
