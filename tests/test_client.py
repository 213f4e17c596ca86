"""Tests for the Dokploy HTTP client (dokploy_mcp/client.py)."""

import httpx
import pytest

from dokploy_mcp.client import DokployAPIError, DokployClient


class TestDokployClient:
    async def test_get_sends_api_key_and_query(self, fake_dokploy):
        fake_dokploy.add("project.one", {"projectId": "proj-1"})

        result = await fake_dokploy.client().get("project.one", {"projectId": "proj-1"})

        assert result == {"projectId": "proj-1"}
        request = fake_dokploy.requests[0]
        assert request.method == "GET"
        assert request.url.path == "/api/project.one"
        assert request.url.params["projectId"] == "proj-1"
        assert request.headers["x-api-key"] == "test-api-key"

    async def test_post_sends_json_body(self, fake_dokploy):
        fake_dokploy.add("application.deploy", True)

        result = await fake_dokploy.client().post("application.deploy", {"applicationId": "a"})

        assert result is True
        request = fake_dokploy.requests[0]
        assert request.method == "POST"
        assert fake_dokploy.body(request) == {"applicationId": "a"}

    async def test_not_found_returns_none(self, fake_dokploy):
        assert await fake_dokploy.client().get("project.one", {"projectId": "x"}) is None

    async def test_empty_body_returns_none(self, fake_dokploy):
        fake_dokploy.add("application.stop", None)

        assert await fake_dokploy.client().post("application.stop", {}) is None

    async def test_server_error_raises_with_dokploy_message(self, fake_dokploy):
        fake_dokploy.add("application.create", {"message": "Environment not found"}, status=400)

        with pytest.raises(DokployAPIError, match="Environment not found") as exc_info:
            await fake_dokploy.client().post("application.create", {"name": "x"})

        assert exc_info.value.status_code == 400

    async def test_transport_error_raises(self):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = DokployClient(
            "https://dokploy.test/api", "key", transport=httpx.MockTransport(refuse)
        )

        with pytest.raises(DokployAPIError, match="connection refused") as exc_info:
            await client.get("project.all")

        assert exc_info.value.status_code is None

    async def test_missing_configuration_raises_before_request(self, fake_dokploy):
        client = DokployClient("", "", transport=httpx.MockTransport(fake_dokploy.handler))

        with pytest.raises(DokployAPIError, match="DOKPLOY_URL"):
            await client.get("project.all")

        assert fake_dokploy.requests == []
