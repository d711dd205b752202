"""Port: stored file lookup."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class FileLookupPort(Protocol):
    """Resolve stored file references."""

    def resolve_url(self, ref: str) -> str | None: ...

    def cache_tags(self, ref: str) -> list[str]: ...
