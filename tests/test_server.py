"""
Tests for server startup and the plain HTTP probes (dokploy_mcp/server.py).

main() must validate the locked project before building or running the MCP
server, and exit with status 1 when the project doesn't exist.
"""

import httpx
import pytest

from dokploy_mcp import server


@pytest.fixture
def patched_main(monkeypatch, make_settings, fake_dokploy):
    """Point main() at fake_dokploy and record whether the server was run."""
    started = []

    class FakeServer:
        def run(self, **kwargs):
            started.append(kwargs)

    def _patch(**overrides):
        monkeypatch.setattr(server, "settings", make_settings(**overrides))
        monkeypatch.setattr(server, "configure_logging", lambda *args: None)
        monkeypatch.setattr(server, "build_client", lambda settings: fake_dokploy.client())
        monkeypatch.setattr(server, "create_server", lambda *args, **kwargs: FakeServer())
        return started

    return _patch


class TestStartup:
    def test_missing_locked_project_stops_startup(self, patched_main, fake_dokploy):
        started = patched_main(locked_project_id="proj-ghost")

        with pytest.raises(SystemExit) as exc_info:
            server.main()

        assert exc_info.value.code == 1
        assert started == []
        [request] = fake_dokploy.calls("project.one")
        assert request.url.params["projectId"] == "proj-ghost"

    def test_unreachable_dokploy_stops_startup(self, patched_main, fake_dokploy):
        fake_dokploy.add("project.one", {"message": "Unauthorized"}, status=401)
        started = patched_main(locked_project_id="proj-1")

        with pytest.raises(SystemExit):
            server.main()

        assert started == []

    def test_existing_locked_project_starts_server(self, patched_main, fake_dokploy):
        fake_dokploy.add("project.one", {"projectId": "proj-1", "name": "Shop"})
        started = patched_main(locked_project_id="proj-1")

        server.main()

        assert started == [{"transport": "stdio"}]

    def test_no_lock_starts_without_lookup(self, patched_main, fake_dokploy):
        started = patched_main(locked_project_id=None, transport="streamable-http", port=9000)

        server.main()

        assert fake_dokploy.requests == []
        assert started[0]["transport"] == "streamable-http"
        assert started[0]["port"] == 9000


class TestProbes:
    async def _get(self, app, path: str) -> httpx.Response:
        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app)) as client:
            return await client.get(f"http://testserver{path}")

    async def test_health(self, make_settings, fake_dokploy):
        mcp = server.create_server(make_settings(), client=fake_dokploy.client())

        response = await self._get(mcp.http_app(transport="streamable-http"), "/health")

        assert response.json() == {"status": "healthy"}

    async def test_ready_reports_lock(self, make_settings, fake_dokploy):
        mcp = server.create_server(
            make_settings(locked_project_id="proj-1"), client=fake_dokploy.client()
        )

        response = await self._get(mcp.http_app(transport="streamable-http"), "/ready")

        assert response.status_code == 200
        assert response.json()["project_lock"] == {
            "enabled": True,
            "locked_project_id": "proj-1",
        }

    async def test_not_ready_without_credentials(self, make_settings, fake_dokploy):
        mcp = server.create_server(make_settings(api_key=""), client=fake_dokploy.client())

        response = await self._get(mcp.http_app(transport="streamable-http"), "/ready")

        assert response.status_code == 503
