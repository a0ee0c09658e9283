"""
Pytest configuration and fixtures for render-mcp-server tests.
"""

import json

import httpx
import pytest

from render_mcp.client import RenderClient
from render_mcp.context import RequestContext
from render_mcp.session import InMemorySession
from render_mcp.useragent import PlatformInfo


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch, tmp_path):
    """
    Keep tests away from the developer's real config and credentials.

    Every test gets its own RENDER_CONFIG_PATH under tmp_path and starts with
    no API key, no workspace override and no Redis URL.
    """
    monkeypatch.setenv("RENDER_CONFIG_PATH", str(tmp_path / "render" / "mcp-server.yaml"))
    for name in ("RENDER_API_KEY", "RENDER_WORKSPACE", "REDIS_URL", "RENDER_HOST", "LOG_LEVEL",
                 "TRANSPORT", "PORT", "RENDER_DASHBOARD_URL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def platform_info():
    return PlatformInfo(detect=lambda: "TestOS - 1.0")


@pytest.fixture
def session():
    return InMemorySession()


@pytest.fixture
def ctx(session):
    """An authenticated HTTP-style context with an empty session."""
    return RequestContext(
        connection_id="conn-1", transport="http", session=session, api_token="rnd_test"
    )


class FakeRenderAPI:
    """
    Route table for httpx.MockTransport.

    Usage:
        api = FakeRenderAPI()
        api.add("GET", "/v1/services", [...])
        client = api.client()
    """

    def __init__(self):
        self.routes = {}
        self.requests = []

    def add(self, method, path, body, status=200):
        """Queue a response; repeated adds for one route are served in order."""
        self.routes.setdefault((method, path), []).append((status, body))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"message": "not found"})
        status, body = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(body, (bytes, str)):
            return httpx.Response(status, content=body)
        return httpx.Response(status, content=json.dumps(body).encode())

    def client(self) -> RenderClient:
        return RenderClient(
            "https://api.render.test/v1/", transport=httpx.MockTransport(self.handler)
        )


@pytest.fixture
def api():
    return FakeRenderAPI()
