"""Adapter: static path alias map."""

from __future__ import annotations

import json
from pathlib import Path


class MappingAliasLookup:
    """Concrete AliasLookupPort over an in-memory {internal path: alias} map."""

    def __init__(self, aliases: dict[str, str] | None = None) -> None:
        self._aliases = {self._key(k): v for k, v in (aliases or {}).items()}

    @staticmethod
    def _key(path: str) -> str:
        return path if path.startswith("/") else "/" + path

    @classmethod
    def from_file(cls, path: str | Path) -> MappingAliasLookup:
        """Load a JSON object file; a missing file means no aliases."""
        file_path = Path(path)
        if not file_path.exists():
            return cls()
        with open(file_path, encoding="utf-8") as f:
            raw = json.load(f)
        if not isinstance(raw, dict):
            raise ValueError(f"alias file {file_path} must contain a JSON object")
        return cls({str(k): str(v) for k, v in raw.items()})

    def alias_for_path(self, path: str) -> str | None:
        return self._aliases.get(self._key(path))
