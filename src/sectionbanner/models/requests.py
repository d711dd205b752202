"""Request DTOs: the raw request handed to the engine and admin form submissions."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ContentItem(BaseModel):
    """The content item routed to on a canonical content page."""

    entity_type: str = Field(default="node", description="Entity type id")
    id: str = Field(..., description="Content item identifier")
    bundle: str = Field(..., description="Content type (bundle) machine name")
    title: str = Field(default="", description="Content item title")
    url: str = Field(default="", description="Absolute URL of the content item")
    author_name: str = Field(default="", description="Display name of the author")


class CurrentUser(BaseModel):
    """Account viewing the page (token data only)."""

    name: str = Field(default="", description="Display name")
    mail: str = Field(default="", description="E-mail address")


class RawRequest(BaseModel):
    """What the hosting framework knows about the current request."""

    path: str = Field(default="/", description="Internal (system) path")
    route_name: str | None = Field(default=None, description="Resolved route identifier")
    alias: str | None = Field(
        default=None,
        description="Alias if already resolved by the host; otherwise looked up",
    )
    node: ContentItem | None = Field(default=None, description="Routed content item, if any")
    user: CurrentUser | None = Field(default=None, description="Current account, if any")
    page_title: str = Field(default="", description="Title of the current page")
    page_url: str = Field(default="", description="Absolute URL of the current page")
    language: str | None = Field(default=None, description="Interface language code")
    content_language: str | None = Field(default=None, description="Content language code")


class BannerEdit(BaseModel):
    """One banner row of an admin form submission (one language)."""

    index: int = Field(..., ge=0, description="Position of the banner being edited")
    language: str | None = Field(default=None, description="Language the content fields belong to")
    title: str = Field(default="", description="Title for this language")
    body_value: str = Field(default="", description="Body for this language")
    body_format: str | None = Field(default=None, description="Body format; settings default if omitted")
    image: str | None = Field(default=None, description="New image reference; existing one kept if omitted")
    target_sections: str = Field(
        default="",
        description="Targets, one per line or comma separated; existing ones kept if blank",
    )
    css_class: str = Field(default="", description="CSS classes; existing ones kept if blank")


class BannerFormSubmission(BaseModel):
    """A full save of the admin form in one editing language."""

    language: str = Field(..., description="Editing language selected in the form")
    banners: list[BannerEdit] = Field(default_factory=list, description="Edited banner rows")
