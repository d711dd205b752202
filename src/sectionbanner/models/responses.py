"""Response DTOs handed to the rendering layer."""

from __future__ import annotations

from pydantic import BaseModel, Field

CACHE_PERMANENT = -1

# Selection depends on the route, the path and both language negotiations.
BANNER_CACHE_CONTEXTS: tuple[str, ...] = (
    "route",
    "url.path",
    "languages:language_interface",
    "languages:language_content",
)


class CacheMetadata(BaseModel):
    """How long and under which variations rendered output may be cached."""

    tags: list[str] = Field(default_factory=list, description="Invalidation tags")
    contexts: list[str] = Field(
        default_factory=lambda: list(BANNER_CACHE_CONTEXTS),
        description="Request variations the output depends on",
    )
    max_age: int = Field(default=CACHE_PERMANENT, description="Seconds; -1 means permanent")


class BannerRender(BaseModel):
    """Render data for the selected banner."""

    banner_index: int = Field(..., ge=0, description="Position of the selected banner")
    language: str | None = Field(default=None, description="Language the content was resolved from")
    title: str | None = Field(default=None, description="Title with tokens replaced; None when empty")
    body: str | None = Field(default=None, description="Rendered, sanitized body markup")
    body_raw: str = Field(default="", description="Body with tokens replaced, before rendering")
    body_format: str = Field(..., description="Rich-text format of the body")
    image_url: str | None = Field(default=None, description="Absolute image URL")
    css_class: str = Field(default="", description="Additional CSS classes as configured")
    css_class_suggestion: str = Field(default="", description="CSS classes sanitized for template names")
    matched_pattern: str = Field(..., description="Pattern that selected the banner")
    matched_kind: str = Field(..., description="Rule that matched the pattern")
    section_suggestion: str | None = Field(default=None, description="Matched pattern sanitized for template names")
    template_suggestions: list[str] = Field(default_factory=list, description="Candidate templates, least specific first")
    cache: CacheMetadata = Field(default_factory=CacheMetadata, description="Cache metadata")
    request_id: str = Field(..., description="Trace ID for this render")
