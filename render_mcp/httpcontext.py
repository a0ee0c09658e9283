"""
HTTP connection metadata carried from the inbound MCP request to outbound
Render API requests.

Only the HTTP transport has any; in stdio mode ``connection_metadata(ctx)``
returns an empty ConnectionMetadata.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from render_mcp.context import RequestContext
from render_mcp.logging_utils import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ConnectionMetadata:
    user_agent: str = ""      # client's User-Agent header
    forwarded_for: str = ""   # X-Forwarded-For chain, most recent hop last


class _AddrError(ValueError):
    pass


def _split_host_port(addr: str) -> tuple[str, str]:
    """Split "host:port" / "[v6]:port" the way a strict host/port splitter does."""
    if addr.startswith("["):
        end = addr.find("]")
        if end < 0:
            raise _AddrError("missing ']' in address")
        if addr[end + 1:end + 2] != ":":
            raise _AddrError("missing port in address")
        return addr[1:end], addr[end + 2:]

    host, sep, port = addr.rpartition(":")
    if not sep:
        raise _AddrError("missing port in address")
    if ":" in host:
        raise _AddrError("too many colons in address")
    return host, port


def client_ip(remote_addr: str) -> str:
    """Host part of a peer address, port stripped. Unparseable input is returned as-is."""
    if not remote_addr:
        return ""
    try:
        host, _ = _split_host_port(remote_addr)
    except _AddrError as e:
        logger.debug(f"Could not parse remote address {remote_addr!r}: {e}")
        return remote_addr
    return host


def _last_xff_entry(xff: str) -> str:
    return xff.split(",")[-1].strip()


def build_xff(existing_xff: str, remote_addr: str) -> str:
    """
    Append the peer IP to an X-Forwarded-For chain.

    The peer is skipped only when it is already the last hop; an earlier
    occurrence elsewhere in the chain is kept and the peer appended again.
    """
    ip = client_ip(remote_addr)
    if not ip:
        return existing_xff
    if not existing_xff:
        return ip
    if _last_xff_entry(existing_xff) == ip:
        return existing_xff
    return f"{existing_xff}, {ip}"


def _remote_addr(request: Any) -> str:
    client = getattr(request, "client", None)
    if client is None:
        return ""
    host, port = client[0], client[1]
    if not host:
        return ""
    if port is None:
        return host
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def from_request(request: Any) -> ConnectionMetadata:
    """Extract metadata from a Starlette request."""
    return ConnectionMetadata(
        user_agent=request.headers.get("user-agent", ""),
        forwarded_for=build_xff(
            request.headers.get("x-forwarded-for", ""), _remote_addr(request)
        ),
    )


def context_with_connection_metadata_value(
    ctx: RequestContext, metadata: ConnectionMetadata
) -> RequestContext:
    return ctx.with_values(connection=metadata)


async def context_with_connection_metadata(ctx: RequestContext, request: Any) -> RequestContext:
    """HTTP context function: attach metadata from the inbound request."""
    if request is None:
        return ctx
    return context_with_connection_metadata_value(ctx, from_request(request))


def connection_metadata(ctx: RequestContext) -> ConnectionMetadata:
    """Metadata bound to ``ctx``, or an empty value when none is bound."""
    return ctx.connection or ConnectionMetadata()
