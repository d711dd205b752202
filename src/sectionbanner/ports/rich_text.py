"""Port: rich-text rendering."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class RichTextRendererPort(Protocol):
    """Turn a raw body value into sanitized markup for its format."""

    def render(self, value: str, format: str) -> str: ...
