"""Pattern matcher: decide whether one target pattern applies to a request.

A pattern string is ambiguous by shape (``articles`` may be a path segment,
a bundle or a listing name), so the specific forms are tried in a fixed
order before falling back to generic path matching:

1. route      ``section_banner.settings`` equal to the route id
2. bundle     ``bundle:article`` / ``node.type.article``
3. all_content ``/node/*`` while a content item is routed
4. listing_by_id ``view.articles``
5. listing_by_name ``articles`` while on a listing route
6. listing_by_path ``/articles`` while on a listing route (path equality)
7. listing_by_name, safety net for bare tokens on a listing route

Only the first rule whose guard holds is tested. If it does not match, the
generic path rule (exact, alias, then ``*`` wildcard) still gets a say.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Callable

from .context import LISTING_ROUTE_PREFIX, RequestContext, normalize_path

EXCLUSION_PREFIX = "except:"
BUNDLE_PREFIXES = ("bundle:", "node.type.")
_ALL_CONTENT_RE = re.compile(r"^/?node/\*/?$")

_LOGGER = logging.getLogger("sectionbanner.patterns")


class PatternKind(str, Enum):
    """Which rule matched a pattern."""

    route = "route"
    bundle = "bundle"
    all_content = "all_content"
    listing_by_id = "listing_by_id"
    listing_by_name = "listing_by_name"
    listing_by_path = "listing_by_path"
    path = "path"


@dataclass(frozen=True)
class PatternRule:
    """A guard deciding whether the rule owns the pattern, and its test."""

    kind: PatternKind
    applies: Callable[[str, RequestContext], bool]
    test: Callable[[str, RequestContext], bool]


# ---------------------------------------------------------------------------
# Exclusions
# ---------------------------------------------------------------------------


def is_exclusion(pattern: str) -> bool:
    return pattern.strip().startswith(EXCLUSION_PREFIX)


def exclusion_target(pattern: str) -> str:
    """Bundle named by ``except:bundle:x``, ``except:node.type.x`` or ``except:x``."""
    target = pattern.strip()[len(EXCLUSION_PREFIX):]
    for prefix in BUNDLE_PREFIXES:
        if target.startswith(prefix):
            return target[len(prefix):]
    return target


def bundle_name(pattern: str) -> str | None:
    for prefix in BUNDLE_PREFIXES:
        if pattern.startswith(prefix):
            return pattern[len(prefix):]
    return None


# ---------------------------------------------------------------------------
# Rule guards and tests
# ---------------------------------------------------------------------------


def _route_applies(pattern: str, ctx: RequestContext) -> bool:
    return "." in pattern and pattern == ctx.route_id


def _always(pattern: str, ctx: RequestContext) -> bool:
    return True


def _bundle_applies(pattern: str, ctx: RequestContext) -> bool:
    return pattern.startswith(BUNDLE_PREFIXES)


def _bundle_test(pattern: str, ctx: RequestContext) -> bool:
    return ctx.current_bundle is not None and ctx.current_bundle == bundle_name(pattern)


def _all_content_applies(pattern: str, ctx: RequestContext) -> bool:
    return _ALL_CONTENT_RE.match(pattern) is not None


def _all_content_test(pattern: str, ctx: RequestContext) -> bool:
    return ctx.is_content_item


def _listing_id_applies(pattern: str, ctx: RequestContext) -> bool:
    return pattern.startswith(LISTING_ROUTE_PREFIX)


def _listing_id_test(pattern: str, ctx: RequestContext) -> bool:
    if not ctx.current_view_route_id:
        return False
    name = pattern[len(LISTING_ROUTE_PREFIX):]
    return ctx.current_view_route_id.startswith(f"{LISTING_ROUTE_PREFIX}{name}.")


def _on_listing(pattern: str, ctx: RequestContext) -> bool:
    return ctx.current_view_route_id is not None


def _listing_name_test(pattern: str, ctx: RequestContext) -> bool:
    return ctx.listing_name is not None and ctx.listing_name == pattern


def _listing_path_applies(pattern: str, ctx: RequestContext) -> bool:
    return pattern.startswith("/") and ctx.current_view_route_id is not None


def _listing_path_test(pattern: str, ctx: RequestContext) -> bool:
    target = pattern.rstrip("/")
    if target == ctx.current_path.rstrip("/"):
        return True
    alias = ctx.alias_path.rstrip("/") if ctx.alias_path else ""
    return bool(alias) and target == alias


def _bare_token_on_listing(pattern: str, ctx: RequestContext) -> bool:
    return ctx.current_view_route_id is not None and not any(c in pattern for c in ":/*")


DEFAULT_RULES: tuple[PatternRule, ...] = (
    PatternRule(PatternKind.route, _route_applies, _always),
    PatternRule(PatternKind.bundle, _bundle_applies, _bundle_test),
    PatternRule(PatternKind.all_content, _all_content_applies, _all_content_test),
    PatternRule(PatternKind.listing_by_id, _listing_id_applies, _listing_id_test),
    PatternRule(PatternKind.listing_by_name, _on_listing, _listing_name_test),
    # Both shadowed by the listing-route guard above; kept so that narrowing
    # it cannot silently drop listing paths or bare listing names.
    PatternRule(PatternKind.listing_by_path, _listing_path_applies, _listing_path_test),
    PatternRule(PatternKind.listing_by_name, _bare_token_on_listing, _listing_name_test),
)


# ---------------------------------------------------------------------------
# Generic path rule
# ---------------------------------------------------------------------------


class WildcardError(ValueError):
    """A wildcard pattern could not be compiled."""


@lru_cache(maxsize=512)
def compile_wildcard(pattern: str) -> re.Pattern[str]:
    """Compile ``/news/*`` style patterns; ``*`` matches any run of characters."""
    normalized = normalize_path(pattern)
    regex = "^" + ".*".join(re.escape(part) for part in normalized.split("*")) + "$"
    try:
        return re.compile(regex)
    except re.error as e:
        raise WildcardError(f"cannot compile wildcard {pattern!r}: {e}") from e


def path_matches(pattern: str, ctx: RequestContext) -> bool:
    target = normalize_path(pattern)
    current = normalize_path(ctx.current_path)
    alias = normalize_path(ctx.alias_path) if ctx.alias_path else None

    if target == current:
        return True
    if alias is not None and target == alias:
        return True
    if "*" not in target:
        return False

    try:
        regex = compile_wildcard(pattern)
    except WildcardError as e:
        _LOGGER.warning("malformed_pattern", extra={"pattern": pattern, "error": str(e)})
        return False
    if regex.match(current):
        return True
    return alias is not None and regex.match(alias) is not None


# ---------------------------------------------------------------------------
# Matcher
# ---------------------------------------------------------------------------


class PatternMatcher:
    """Evaluate inclusion patterns against a RequestContext."""

    def __init__(self, rules: tuple[PatternRule, ...] = DEFAULT_RULES) -> None:
        self._rules = rules

    def match_kind(self, pattern: str, ctx: RequestContext) -> PatternKind | None:
        """Return the kind of rule that matched, or None."""
        pattern = pattern.strip()
        if not pattern or is_exclusion(pattern):
            return None

        for rule in self._rules:
            if rule.applies(pattern, ctx):
                if rule.test(pattern, ctx):
                    return rule.kind
                break

        if path_matches(pattern, ctx):
            return PatternKind.path
        return None

    def matches(self, pattern: str, ctx: RequestContext) -> bool:
        return self.match_kind(pattern, ctx) is not None

    def classify(self, pattern: str) -> str:
        """Describe how a pattern will be read, independent of any request."""
        pattern = pattern.strip()
        if not pattern:
            return "blank"
        if is_exclusion(pattern):
            return "exclusion"
        if bundle_name(pattern) is not None:
            return PatternKind.bundle.value
        if _ALL_CONTENT_RE.match(pattern):
            return PatternKind.all_content.value
        if pattern.startswith(LISTING_ROUTE_PREFIX):
            return PatternKind.listing_by_id.value
        if not any(c in pattern for c in ":/*"):
            return PatternKind.route.value if "." in pattern else "listing_name_or_path"
        if "*" in pattern:
            return "wildcard_path"
        return PatternKind.path.value
