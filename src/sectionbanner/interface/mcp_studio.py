"""Studio entrypoint.

Starts the MCP Studio server (admin-only: banner editing, import, uploads).
Use for CI/CD, backoffice, or trusted operators.

Usage:
    python -m sectionbanner.interface.mcp_studio
    # or:
    section-banner-studio
"""

from __future__ import annotations

from .mcp.auth import check_scope
from .mcp.server import create_server


def main() -> None:
    check_scope("studio")
    server = create_server(mode="studio")
    server.run(transport="stdio")


if __name__ == "__main__":
    main()
