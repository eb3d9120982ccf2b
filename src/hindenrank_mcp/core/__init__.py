"""Core logic: API client, name resolution, text formatting and data models.

This module is framework-agnostic. It has no dependency on MCP, FastMCP,
or any server framework; the server in ``hindenrank_mcp.server`` is a thin
layer of tool registrations on top of it.
"""
