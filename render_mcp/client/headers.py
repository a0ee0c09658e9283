"""
Authentication and provenance headers for outbound Render API requests.
"""

from __future__ import annotations

from typing import Optional

import httpx

from render_mcp.context import RequestContext
from render_mcp.httpcontext import connection_metadata
from render_mcp.useragent import PlatformInfo, user_agent


def add_headers(
    ctx: RequestContext,
    headers: httpx.Headers,
    token: str,
    platform_info: Optional[PlatformInfo] = None,
) -> httpx.Headers:
    """
    Stamp ``headers`` with User-Agent, Authorization and, when the inbound
    request came through proxies, X-Forwarded-For.

    Mutates and returns ``headers``.
    """
    metadata = connection_metadata(ctx)

    headers["User-Agent"] = user_agent(metadata.user_agent, platform_info)
    headers["Authorization"] = f"Bearer {token}"
    if metadata.forwarded_for:
        headers["X-Forwarded-For"] = metadata.forwarded_for

    return headers
