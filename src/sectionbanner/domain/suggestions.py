"""Template suggestions derived from the matched section and CSS class."""

from __future__ import annotations

import re

THEME_HOOK = "section_banner_block"

_UNSAFE_RE = re.compile(r"[^a-z0-9_-]")
_SECTION_PREFIXES = ("bundle_", "node_type_", "view_")


def css_class_suggestion(css_class: str) -> str:
    """``Hero Wide`` -> ``hero_wide``."""
    if not css_class:
        return ""
    return _UNSAFE_RE.sub("_", css_class.lower())


def section_suggestion(pattern: str | None) -> str | None:
    """``bundle:article`` -> ``article``, ``/news/*`` -> ``news``, ``view.articles`` -> ``articles``."""
    if not pattern:
        return None
    suggestion = _UNSAFE_RE.sub("_", pattern.lower())
    # Known prefixes are removed wherever they occur, not only at the start.
    for prefix in _SECTION_PREFIXES:
        suggestion = suggestion.replace(prefix, "")
    return suggestion.strip("/_*")


def template_suggestions(section: str | None, css: str = "", base: str = THEME_HOOK) -> list[str]:
    """Candidate template names, least specific first."""
    names = [base]
    if css:
        names.append(f"{base}__{css}")
    if section:
        names.append(f"{base}__{section}")
        if css:
            names.append(f"{base}__{section}__{css}")
    return names
