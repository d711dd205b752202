"""Adapter: key-value state store and the banner storage built on it."""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..domain.banner import Banner

_LOGGER = logging.getLogger("sectionbanner.storage")


class MemoryStateStore:
    """Process-local key-value state."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)


class JsonStateStore:
    """Key-value state persisted as one JSON object; last write wins."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        with open(self._path, encoding="utf-8") as f:
            raw = json.load(f)
        if not isinstance(raw, dict):
            raise ValueError(f"state file {self._path} must contain a JSON object")
        return raw

    def _write(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self._path.parent, prefix=".state-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp, self._path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._read().get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    def delete(self, key: str) -> None:
        with self._lock:
            data = self._read()
            if key in data:
                del data[key]
                self._write(data)


class StateBannerStorage:
    """Concrete BannerStoragePort backed by a key-value state store."""

    def __init__(self, state: MemoryStateStore | JsonStateStore, key: str = "section_banner.banners") -> None:
        self._state = state
        self._key = key

    def get_rows(self) -> list[Any]:
        """Stored rows in order, exactly as persisted."""
        raw = self._state.get(self._key, [])
        if not raw:
            return []
        if isinstance(raw, dict):
            # Rows saved with explicit numeric keys.
            raw = [raw[k] for k in sorted(raw, key=_index_key)]
        if not isinstance(raw, list):
            _LOGGER.warning("banner_state_invalid", extra={"key": self._key, "type": type(raw).__name__})
            return []
        return raw

    def read_row(self, row: Any, index: int) -> Banner | None:
        """The row as a Banner, or None (logged) when it cannot be read."""
        try:
            return Banner.model_validate(row)
        except ValidationError as e:
            _LOGGER.warning("banner_row_invalid", extra={"key": self._key, "row": index, "error": str(e)})
            return None

    def get_banners(self) -> list[Banner]:
        """Readable banners only; unreadable rows are skipped."""
        banners = (self.read_row(row, i) for i, row in enumerate(self.get_rows()))
        return [b for b in banners if b is not None]

    def save_rows(self, rows: list[Any]) -> None:
        self._state.set(self._key, [r.model_dump(mode="json") if isinstance(r, Banner) else r for r in rows])

    def save_banners(self, banners: list[Banner]) -> None:
        self.save_rows(list(banners))


def _index_key(key: str) -> tuple[int, str]:
    try:
        return int(key), ""
    except (TypeError, ValueError):
        return 1 << 30, str(key)
