"""Port: path alias lookup."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class AliasLookupPort(Protocol):
    """Resolve the human-readable alias of an internal path."""

    def alias_for_path(self, path: str) -> str | None: ...
