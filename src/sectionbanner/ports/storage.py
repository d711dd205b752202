"""Port: banner list storage and cache invalidation."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from ..domain.banner import Banner


@runtime_checkable
class BannerStoragePort(Protocol):
    """Read/write access to the ordered banner list."""

    def get_banners(self) -> list[Banner]:
        """Return banners in stored order; an empty list when nothing is stored."""
        ...

    def save_banners(self, banners: list[Banner]) -> None: ...


@runtime_checkable
class BannerRowStoragePort(BannerStoragePort, Protocol):
    """Positional access to the stored rows, readable or not.

    Admin writes go through rows so that a row the model cannot read keeps
    its position and survives the write.
    """

    def get_rows(self) -> list[Any]: ...

    def save_rows(self, rows: list[Any]) -> None: ...


@runtime_checkable
class CacheInvalidatorPort(Protocol):
    """Invalidate cached output by tag."""

    def invalidate_tags(self, tags: list[str]) -> None: ...
