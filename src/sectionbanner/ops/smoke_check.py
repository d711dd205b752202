"""Smoke check: verify the banner state and files directory are readable."""

from __future__ import annotations

import os
from pathlib import Path


def run_smoke_check() -> dict:
    """Run a minimal health check (state store + files dir).

    Returns:
        Dict with keys: ok (bool), state (str), files (str), banners (int | None), error (str | None).
    """
    result: dict = {"ok": False, "state": "unknown", "files": "unknown", "banners": None, "error": None}
    try:
        from ..config.runtime import get_settings
        from ..wiring import build_storage

        settings = get_settings()
        # State readable? A missing file is an empty banner list.
        try:
            result["banners"] = len(build_storage(settings).get_banners())
            result["state"] = "ok"
        except Exception:
            result["state"] = "error"
        # Files directory
        files_dir = Path(settings.files_dir)
        if not files_dir.exists():
            result["files"] = "missing"
        elif os.access(files_dir, os.R_OK):
            result["files"] = "ok"
        else:
            result["files"] = "error"
        result["ok"] = result["state"] == "ok" and result["files"] in ("ok", "missing")
    except Exception as e:
        result["error"] = str(e)
    return result
