"""MCP server exposing jarlens queries as tools."""

from jarlens.server.mcp_server import create_mcp_server

__all__ = ["create_mcp_server"]
