"""
Tests for render_mcp/client/headers.py and render_mcp/useragent.py.
"""

import threading
from unittest.mock import patch

import httpx
import pytest
from starlette.requests import Request

from render_mcp import __version__
from render_mcp.client.headers import add_headers
from render_mcp.context import RequestContext
from render_mcp.httpcontext import ConnectionMetadata, context_with_connection_metadata
from render_mcp.useragent import PlatformInfo, _linux_info, detect_os_info, user_agent


# ============================================================================
# user_agent / PlatformInfo
# ============================================================================

class TestUserAgent:

    def test_without_client(self, platform_info):
        assert user_agent("", platform_info) == f"render-mcp-server/{__version__} (TestOS - 1.0)"

    def test_with_client(self, platform_info):
        assert user_agent("Cursor/0.43", platform_info) == (
            f"render-mcp-server/{__version__} (TestOS - 1.0) Cursor/0.43"
        )

    def test_detection_runs_once(self):
        calls = []

        def detect():
            calls.append(1)
            return "Linux"

        info = PlatformInfo(detect=detect)
        threads = [threading.Thread(target=info.get) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert info.get() == "Linux"
        assert len(calls) == 1


class TestDetectOSInfo:

    def test_linux_pretty_name(self, tmp_path):
        os_release = tmp_path / "os-release"
        os_release.write_text('NAME="Ubuntu"\nPRETTY_NAME="Ubuntu 22.04.3 LTS"\n')
        assert _linux_info(os_release) == ("Ubuntu", "22.04.3")

    def test_linux_missing_file(self, tmp_path):
        assert _linux_info(tmp_path / "missing") == ("Linux", "")

    def test_darwin(self):
        with patch("render_mcp.useragent.platform.system", return_value="Darwin"), \
             patch("render_mcp.useragent._run", return_value="14.2.1\n"):
            assert detect_os_info() == "macOS - 14.2.1"

    def test_windows(self):
        with patch("render_mcp.useragent.platform.system", return_value="Windows"), \
             patch("render_mcp.useragent._run", return_value="Microsoft Windows [Version 10.0.19044.2604]"):
            assert detect_os_info() == "Windows - 10.0.19044.2604"

    def test_detection_failure_falls_back_to_name(self):
        with patch("render_mcp.useragent.platform.system", return_value="Darwin"), \
             patch("render_mcp.useragent._run", return_value=None):
            assert detect_os_info() == "macOS"


# ============================================================================
# add_headers
# ============================================================================

class TestAddHeaders:

    def test_stdio_context(self, platform_info):
        headers = add_headers(RequestContext(), httpx.Headers(), "rnd_abc", platform_info)
        assert headers["Authorization"] == "Bearer rnd_abc"
        assert headers["User-Agent"] == f"render-mcp-server/{__version__} (TestOS - 1.0)"
        assert "X-Forwarded-For" not in headers

    def test_http_metadata(self, platform_info):
        ctx = RequestContext(
            connection=ConnectionMetadata(user_agent="Claude/2", forwarded_for="198.51.100.2, 10.0.0.1")
        )
        headers = add_headers(ctx, httpx.Headers(), "rnd_abc", platform_info)
        assert headers["User-Agent"].endswith(") Claude/2")
        assert headers["X-Forwarded-For"] == "198.51.100.2, 10.0.0.1"

    def test_overwrites_existing_values(self, platform_info):
        headers = httpx.Headers({"Authorization": "Bearer old", "Accept": "application/json"})
        add_headers(RequestContext(), headers, "new", platform_info)
        assert headers["Authorization"] == "Bearer new"
        assert headers["Accept"] == "application/json"

    @pytest.mark.asyncio
    async def test_end_to_end_from_inbound_request(self, platform_info):
        scope = {
            "type": "http",
            "method": "POST",
            "path": "/mcp",
            "headers": [
                (b"user-agent", b"Cursor/0.43"),
                (b"x-forwarded-for", b"198.51.100.2"),
            ],
            "client": ("10.1.2.3", 40000),
        }
        ctx = await context_with_connection_metadata(RequestContext(transport="http"), Request(scope))
        headers = add_headers(ctx, httpx.Headers(), "tok", platform_info)

        assert headers["User-Agent"] == f"render-mcp-server/{__version__} (TestOS - 1.0) Cursor/0.43"
        assert headers["X-Forwarded-For"] == "198.51.100.2, 10.1.2.3"
        assert headers["Authorization"] == "Bearer tok"
