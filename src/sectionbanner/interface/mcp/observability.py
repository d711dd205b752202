"""Observability: structured tool logs (trace_id, tool, latency_ms) and in-process counters.

Counters cover tool calls and errors per tool, plus render cache hits and
misses; ``metrics_snapshot`` adds the hit rate for health output.
"""

from __future__ import annotations

import logging
from typing import Any

_LOGGER = logging.getLogger("sectionbanner.mcp")

METRICS: dict[str, dict[str, int]] = {
    "tool_calls": {},
    "errors": {},
    "render_cache": {"hits": 0, "misses": 0},
}


def get_logger() -> logging.Logger:
    return _LOGGER


def log_tool_invocation(
    tool: str,
    trace_id: str | None,
    latency_ms: float,
    error: str | None = None,
    extra: dict[str, Any] | None = None,
) -> None:
    payload: dict[str, Any] = {
        "tool": tool,
        "trace_id": trace_id,
        "latency_ms": round(latency_ms, 2),
    }
    if error:
        payload["error"] = error
    if extra:
        payload.update(extra)
    _LOGGER.info("tool_invocation", extra=payload)
    METRICS["tool_calls"][tool] = METRICS["tool_calls"].get(tool, 0) + 1
    if error:
        METRICS["errors"][tool] = METRICS["errors"].get(tool, 0) + 1


def record_render_cache(hit: bool | None) -> None:
    """Count one cached-render lookup; None (caching off) is not counted."""
    if hit is None:
        return
    METRICS["render_cache"]["hits" if hit else "misses"] += 1


def render_cache_hit_rate() -> float | None:
    counts = METRICS["render_cache"]
    total = counts["hits"] + counts["misses"]
    return round(counts["hits"] / total, 4) if total else None


def metrics_snapshot() -> dict[str, Any]:
    """Current counters plus the render cache hit rate (for health output)."""
    snapshot: dict[str, Any] = {k: dict(v) for k, v in METRICS.items()}
    snapshot["render_cache"]["hit_rate"] = render_cache_hit_rate()
    return snapshot


def reset_metrics() -> None:
    METRICS["tool_calls"].clear()
    METRICS["errors"].clear()
    METRICS["render_cache"].update(hits=0, misses=0)
