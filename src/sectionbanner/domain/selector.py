"""BannerSelector: pick the first banner whose patterns match a request."""

from __future__ import annotations

from typing import Any, Sequence

from pydantic import BaseModel, ConfigDict, Field

from .banner import Banner
from .context import RequestContext
from .patterns import PatternKind, PatternMatcher, exclusion_target, is_exclusion


class Selection(BaseModel):
    """The winning banner and the pattern that selected it."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=0, description="Position of the banner in the snapshot")
    banner: Banner = Field(..., description="Selected banner")
    matched_pattern: str = Field(..., description="Pattern that matched, as stored (stripped)")
    matched_kind: PatternKind = Field(..., description="Rule that matched the pattern")


class BannerSelector:
    """Apply exclusion, then inclusion patterns, banner by banner in list order."""

    def __init__(self, matcher: PatternMatcher | None = None) -> None:
        self._matcher = matcher or PatternMatcher()

    def select(self, banners: Sequence[Banner], ctx: RequestContext) -> Selection | None:
        """Return the first matching banner, or None. Pure and deterministic."""
        for index, banner in enumerate(banners):
            targets = banner.targets
            if not targets:
                continue
            if self.excluded_by(banner, ctx) is not None:
                continue
            hit = self._first_match(targets, ctx)
            if hit is not None:
                pattern, kind = hit
                return Selection(index=index, banner=banner, matched_pattern=pattern, matched_kind=kind)
        return None

    def excluded_by(self, banner: Banner, ctx: RequestContext) -> str | None:
        """Return the exclusion pattern that rules this banner out, if any."""
        if ctx.current_bundle is None:
            return None
        for pattern in banner.targets:
            if is_exclusion(pattern) and exclusion_target(pattern) == ctx.current_bundle:
                return pattern
        return None

    def reason(self, banner: Banner, ctx: RequestContext) -> str:
        """Return audit reason for this banner against the context."""
        if not banner.targets:
            return "skipped: no_targets"
        excluded = self.excluded_by(banner, ctx)
        if excluded is not None:
            return f"denied: excluded_by {excluded}"
        hit = self._first_match(banner.targets, ctx)
        if hit is None:
            return "no_match"
        pattern, kind = hit
        return f"matched: {kind.value} {pattern}"

    def decisions(self, banners: Sequence[Banner], ctx: RequestContext) -> list[dict[str, Any]]:
        """Per-banner audit entries, marking the banner that select() would return."""
        selection = self.select(banners, ctx)
        out: list[dict[str, Any]] = []
        for index, banner in enumerate(banners):
            out.append(
                {
                    "index": index,
                    "targets": banner.targets,
                    "reason": self.reason(banner, ctx),
                    "selected": selection is not None and selection.index == index,
                }
            )
        return out

    def _first_match(self, targets: list[str], ctx: RequestContext) -> tuple[str, PatternKind] | None:
        for pattern in targets:
            if is_exclusion(pattern):
                continue
            kind = self._matcher.match_kind(pattern, ctx)
            if kind is not None:
                return pattern, kind
        return None
