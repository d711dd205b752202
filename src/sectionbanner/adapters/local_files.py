"""Adapter: images stored in a local directory served under a base URL."""

from __future__ import annotations

import re
from pathlib import Path
from urllib.parse import quote

UPLOAD_SUBDIR = "section-banners"

_UNSAFE_NAME_RE = re.compile(r"[^A-Za-z0-9._-]+")


class LocalFileStore:
    """Concrete FileLookupPort; references are paths relative to files_dir."""

    def __init__(self, files_dir: str | Path, base_url: str) -> None:
        self._root = Path(files_dir)
        self._base_url = base_url.rstrip("/")

    def _path(self, ref: str) -> Path | None:
        candidate = (self._root / ref).resolve()
        root = self._root.resolve()
        if root != candidate and root not in candidate.parents:
            return None
        return candidate

    def exists(self, ref: str) -> bool:
        path = self._path(ref)
        return path is not None and path.is_file()

    def resolve_url(self, ref: str) -> str | None:
        if not ref or not self.exists(ref):
            return None
        return f"{self._base_url}/{quote(ref.lstrip('/'))}"

    def cache_tags(self, ref: str) -> list[str]:
        if not ref or not self.exists(ref):
            return []
        return [f"file:{ref}"]

    def save(self, filename: str, data: bytes) -> str:
        """Store data under the upload directory; returns the new reference."""
        name = _UNSAFE_NAME_RE.sub("_", Path(filename).name).strip("._") or "image"
        target_dir = self._root / UPLOAD_SUBDIR
        target_dir.mkdir(parents=True, exist_ok=True)

        stem, suffix = Path(name).stem, Path(name).suffix
        candidate = target_dir / name
        counter = 0
        while candidate.exists():
            counter += 1
            candidate = target_dir / f"{stem}_{counter}{suffix}"
        candidate.write_bytes(data)
        return f"{UPLOAD_SUBDIR}/{candidate.name}"
