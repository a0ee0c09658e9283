"""
Tests for render_mcp/client/client.py - RenderClient over httpx.MockTransport.
"""

import json
from datetime import datetime, timezone
from urllib.parse import parse_qs, urlsplit

import httpx
import pytest

from render_mcp.client import (
    ListLogsParams,
    ListOwnersParams,
    ListServicesParams,
    RenderClient,
    error_from_response,
)
from render_mcp.context import RequestContext
from render_mcp.errors import BackendUnavailableError, NotAuthenticatedError
from render_mcp.httpcontext import ConnectionMetadata


class TestRequests:

    @pytest.mark.asyncio
    async def test_list_services_query_and_headers(self, api, ctx):
        api.add("GET", "/v1/services", [{"service": {"id": "srv-1"}, "cursor": "c1"}])
        ctx = ctx.with_values(connection=ConnectionMetadata(user_agent="Cursor/1", forwarded_for="1.2.3.4"))

        async with api.client() as client:
            resp = await client.list_services(
                ctx, ListServicesParams(owner_id=["tea-1"], include_previews=False, limit=100)
            )

        assert resp.status_code == 200
        assert resp.parsed == [{"service": {"id": "srv-1"}, "cursor": "c1"}]

        request = api.requests[0]
        assert parse_qs(request.url.query.decode()) == {
            "ownerId": ["tea-1"],
            "includePreviews": ["false"],
            "limit": ["100"],
        }
        assert request.headers["Authorization"] == "Bearer rnd_test"
        assert request.headers["X-Forwarded-For"] == "1.2.3.4"
        assert request.headers["User-Agent"].endswith(" Cursor/1")

    @pytest.mark.asyncio
    async def test_create_deploy_posts_json(self, api, ctx):
        api.add("POST", "/v1/services/srv-1/deploys", {"id": "dep-1"}, status=201)
        async with api.client() as client:
            resp = await client.create_deploy(ctx, "srv-1", {"clearCache": "do_not_clear"})
        assert resp.parsed == {"id": "dep-1"}
        assert json.loads(api.requests[0].content) == {"clearCache": "do_not_clear"}

    @pytest.mark.asyncio
    async def test_error_response_not_parsed(self, api, ctx):
        api.add("GET", "/v1/services/srv-x", {"message": "not found"}, status=404)
        async with api.client() as client:
            resp = await client.retrieve_service(ctx, "srv-x")
        assert resp.parsed is None
        assert str(error_from_response(resp)) == "received response code 404: not found"

    @pytest.mark.asyncio
    async def test_requires_token(self, api):
        async with api.client() as client:
            with pytest.raises(NotAuthenticatedError):
                await client.retrieve_owner(RequestContext(), "tea-1")
        assert api.requests == []

    @pytest.mark.asyncio
    async def test_transport_error_is_backend_unavailable(self, ctx):
        def fail(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = RenderClient("https://api.render.test/v1", transport=httpx.MockTransport(fail))
        try:
            with pytest.raises(BackendUnavailableError):
                await client.list_owners(ctx, ListOwnersParams())
        finally:
            await client.aclose()


class TestLogs:

    def test_list_logs_query(self):
        params = ListLogsParams(
            owner_id="tea-1",
            resource=["srv-1", "srv-2"],
            level=["error"],
            start_time=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
            direction="backward",
            limit=50,
        )
        assert params.to_query() == [
            ("ownerId", "tea-1"),
            ("resource", "srv-1"),
            ("resource", "srv-2"),
            ("level", "error"),
            ("startTime", "2024-01-02T03:04:05+00:00"),
            ("direction", "backward"),
            ("limit", "50"),
        ]

    def test_subscribe_url(self):
        client = RenderClient("https://api.render.test/v1/")
        url = urlsplit(client.subscribe_logs_url(ListLogsParams(owner_id="tea-1", resource=["srv-1"])))
        assert url.scheme == "wss"
        assert url.netloc == "api.render.test"
        assert url.path == "/v1/logs/subscribe"
        assert parse_qs(url.query) == {"ownerId": ["tea-1"], "resource": ["srv-1"]}

    def test_host_defaults_from_environment(self, monkeypatch):
        monkeypatch.setenv("RENDER_HOST", "https://api.example.test/v1")
        assert RenderClient().host == "https://api.example.test/v1/"
