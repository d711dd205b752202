"""MCP servers: engine (render, read-only) and studio (admin)."""

from .server import create_server

__all__ = ["create_server"]
