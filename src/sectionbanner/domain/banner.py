"""Banner domain models."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

DEFAULT_BODY_FORMAT = "basic_html"


class BodyText(BaseModel):
    """Rich-text body: raw value plus the format it is rendered with."""

    value: str = Field(default="", description="Raw body text (may contain tokens)")
    format: str = Field(default=DEFAULT_BODY_FORMAT, description="Rich-text format id")

    @field_validator("value", mode="before")
    @classmethod
    def _coerce_value(cls, value: object) -> object:
        return "" if value is None else value

    @field_validator("format", mode="before")
    @classmethod
    def _coerce_format(cls, value: object) -> object:
        return DEFAULT_BODY_FORMAT if value is None else value


class BannerTranslation(BaseModel):
    """Language-specific banner content."""

    title: str = Field(default="", description="Banner title (may contain tokens)")
    body: BodyText = Field(default_factory=BodyText, description="Banner body")

    @field_validator("title", mode="before")
    @classmethod
    def _coerce_title(cls, value: object) -> object:
        return "" if value is None else value

    @field_validator("body", mode="before")
    @classmethod
    def _coerce_body(cls, value: object) -> object:
        # Stored rows may carry a bare string or null instead of {value, format}.
        if value is None:
            return BodyText()
        if isinstance(value, str):
            return BodyText(value=value)
        return value

    @property
    def is_empty(self) -> bool:
        return not self.title and not self.body.value


class Banner(BaseModel):
    """A configured banner: per-language content plus its display rules.

    Identity is the banner's position in the stored list, so the model
    itself carries no id.
    """

    translations: dict[str, BannerTranslation] = Field(
        default_factory=dict,
        description="Language code -> content; may be sparse",
    )
    image: str | None = Field(default=None, description="Stored file reference, shared by all languages")
    target_sections: list[str] = Field(
        default_factory=list,
        description="Target and exclusion patterns, in stored order",
    )
    css_class: str = Field(default="", description="Additional CSS classes, shared by all languages")

    @field_validator("target_sections", mode="before")
    @classmethod
    def _coerce_targets(cls, value: object) -> object:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("css_class", mode="before")
    @classmethod
    def _coerce_css(cls, value: object) -> object:
        return "" if value is None else value

    @field_validator("image", mode="before")
    @classmethod
    def _coerce_image(cls, value: object) -> object:
        if value in ("", 0, None):
            return None
        if isinstance(value, list):
            return str(value[0]) if value else None
        return str(value)

    @property
    def targets(self) -> list[str]:
        """Stripped, non-blank target patterns in stored order."""
        return [t.strip() for t in self.target_sections if t and t.strip()]

    @property
    def has_content(self) -> bool:
        """True when the banner is worth persisting."""
        return bool(self.translations or self.image or self.targets)

    def label(self, language: str) -> str:
        translation = self.translations.get(language)
        return translation.title if translation else ""
