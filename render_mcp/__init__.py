"""
Render MCP Server

Exposes the Render REST API as MCP tools over stdio or streamable HTTP.
"""

__version__ = "0.3.0"
