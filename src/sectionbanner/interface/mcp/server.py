"""MCP server factory.

Creates either an Engine or Studio server depending on
the requested mode. Each surface registers only its own tool set.
"""

from __future__ import annotations

from mcp.server.fastmcp import FastMCP

from .tools import register_engine_tools, register_studio_tools


_SERVER_NAMES = {
    "engine": "sectionbanner-engine",
    "studio": "sectionbanner-studio",
}


def create_server(mode: str = "engine") -> FastMCP:
    """Build and return a configured FastMCP server.

    Args:
          mode: ``"engine"`` for the Engine (render, read-only)
              or ``"studio"`` for the Studio (banner administration).

    Returns:
        A FastMCP instance with the appropriate tools registered.
    """
    if mode not in _SERVER_NAMES:
        raise ValueError(f"Unknown MCP mode {mode!r}; expected 'engine' or 'studio'")

    server = FastMCP(_SERVER_NAMES[mode])

    if mode == "engine":
        register_engine_tools(server)
        _register_engine_resources(server)
    else:
        register_studio_tools(server)

    return server


def _register_engine_resources(server: FastMCP) -> None:
    """Register Engine resources (pattern schema, token help)."""
    from .resources import (
        PATTERNS_URI,
        TOKENS_URI,
        get_pattern_schema_resource,
        get_token_help_resource,
    )

    @server.resource(PATTERNS_URI, mime_type="application/json")
    def get_pattern_schema() -> str:
        """Target pattern forms in evaluation order."""
        return get_pattern_schema_resource()["contents"]

    @server.resource(TOKENS_URI, mime_type="application/json")
    def get_token_help() -> str:
        """Placeholder tokens usable in titles and bodies."""
        return get_token_help_resource()["contents"]


if __name__ == "__main__":
    server = create_server("engine")
    server.run(transport="stdio")
