"""Outer surfaces: MCP servers and the CLI."""
