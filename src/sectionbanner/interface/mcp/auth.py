"""MCP auth: shared-key gate per surface (studio vs engine)."""

from __future__ import annotations

import os

from ...config.runtime import McpMode, get_settings


def require_studio_scope() -> None:
    """Raises PermissionError when the studio key is required but unset."""
    if not get_settings().require_studio_key:
        return
    if not os.environ.get("MCP_STUDIO_KEY"):
        raise PermissionError("Studio requires MCP_STUDIO_KEY to be set")


def require_engine_scope() -> None:
    """Raises PermissionError when the engine key is required but unset."""
    if not get_settings().require_engine_key:
        return
    if not os.environ.get("MCP_ENGINE_KEY"):
        raise PermissionError("Engine requires MCP_ENGINE_KEY to be set")


def check_scope(mode: str | McpMode) -> None:
    """Check scope for the given server mode. Call at server start or per-request."""
    mode = McpMode(mode)
    if mode is McpMode.studio:
        require_studio_scope()
    else:
        require_engine_scope()
