"""Port: placeholder token substitution."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class TokenSubstitutionPort(Protocol):
    """Replace tokens in text; unresolved tokens are cleared."""

    def replace(self, text: str, data: dict[str, Any]) -> str: ...
