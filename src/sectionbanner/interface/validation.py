"""Pattern validation for admin input and MCP tools.

Catches target patterns that can never match or that read differently
than the author probably intended.
"""

from __future__ import annotations

from typing import Any

from ..domain.context import LISTING_ROUTE_PREFIX
from ..domain.patterns import (
    PatternMatcher,
    WildcardError,
    bundle_name,
    compile_wildcard,
    exclusion_target,
    is_exclusion,
)


class ValidationResult:
    """Result of pattern validation."""

    def __init__(self, is_valid: bool, errors: list[str] | None = None, warnings: list[str] | None = None):
        self.is_valid = is_valid
        self.errors = errors or []
        self.warnings = warnings or []
        self.readings: dict[str, str] = {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON response."""
        return {
            "valid": self.is_valid,
            "errors": self.errors,
            "warnings": self.warnings,
            "readings": self.readings,
        }

    def add_error(self, error: str) -> ValidationResult:
        """Add an error and return self for chaining."""
        self.errors.append(error)
        self.is_valid = False
        return self

    def add_warning(self, warning: str) -> ValidationResult:
        """Add a warning and return self for chaining."""
        self.warnings.append(warning)
        return self


def validate_patterns(patterns: list[str], matcher: PatternMatcher | None = None) -> ValidationResult:
    """Validate one banner's target patterns.

    Returns:
        ValidationResult with errors, warnings and how each pattern will be read
    """
    matcher = matcher or PatternMatcher()
    result = ValidationResult(is_valid=True)

    for raw in patterns:
        pattern = (raw or "").strip()
        if not pattern:
            continue
        result.readings[pattern] = matcher.classify(pattern)

        if any(c.isspace() for c in pattern):
            result.add_warning(f"{pattern!r} contains whitespace; patterns are compared verbatim")

        if is_exclusion(pattern):
            if not exclusion_target(pattern):
                result.add_error(f"{pattern!r} has no content type after 'except:'")
            continue

        name = bundle_name(pattern)
        if name is not None and not name:
            result.add_warning(f"{pattern!r} names no content type and will never match")
        elif pattern == LISTING_ROUTE_PREFIX or (
            pattern.startswith(LISTING_ROUTE_PREFIX) and not pattern[len(LISTING_ROUTE_PREFIX):].strip(".")
        ):
            result.add_warning(f"{pattern!r} names no listing and will never match")

        if "*" in pattern:
            try:
                compile_wildcard(pattern)
            except WildcardError as e:
                result.add_warning(str(e))

    if patterns and not result.readings:
        result.add_warning("no non-blank patterns; the banner will never be shown")
    return result


def validate_banners(banners: list[Any]) -> dict[int, dict[str, Any]]:
    """Validate every banner's targets; keyed by banner index."""
    out: dict[int, dict[str, Any]] = {}
    for index, banner in enumerate(banners):
        if banner is None:
            out[index] = ValidationResult(is_valid=True).add_error("stored row cannot be read").to_dict()
            continue
        out[index] = validate_patterns(banner.targets).to_dict()
    return out
