"""TranslationResolver: pick the language-specific content of a banner."""

from __future__ import annotations

from pydantic import BaseModel, Field

from .banner import DEFAULT_BODY_FORMAT, Banner, BannerTranslation, BodyText


class ResolvedContent(BaseModel):
    """Title and body chosen for display."""

    title: str = Field(default="", description="Raw title (tokens not yet replaced)")
    body: BodyText = Field(default_factory=BodyText, description="Raw body and its format")
    language: str | None = Field(default=None, description="Language the content came from")


class TranslationResolver:
    """Current language, then default language, then first stored, then empty."""

    def __init__(self, default_format: str = DEFAULT_BODY_FORMAT) -> None:
        self._default_format = default_format

    def resolve(self, banner: Banner, current_language: str | None, default_language: str | None) -> ResolvedContent:
        translations = banner.translations
        for language in (current_language, default_language):
            if language and language in translations:
                return self._content(language, translations[language])
        if translations:
            language, translation = next(iter(translations.items()))
            return self._content(language, translation)
        return ResolvedContent(body=BodyText(format=self._default_format))

    def _content(self, language: str, translation: BannerTranslation) -> ResolvedContent:
        body = translation.body
        return ResolvedContent(
            title=translation.title,
            body=BodyText(value=body.value, format=body.format or self._default_format),
            language=language,
        )
