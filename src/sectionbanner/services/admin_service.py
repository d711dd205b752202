"""BannerAdminService: banner list management behind the admin surfaces."""

from __future__ import annotations

from pathlib import PurePath
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from ..config.runtime import RuntimeSettings
from ..domain.banner import Banner, BannerTranslation, BodyText
from ..models.requests import BannerEdit, BannerFormSubmission
from ..ports.storage import BannerRowStoragePort, CacheInvalidatorPort


class BannerValidationError(ValueError):
    """Raised when admin input cannot be stored."""


class SaveResult(BaseModel):
    """Outcome of a form save."""

    banners_count: int = Field(..., description="Banners stored after the save")
    languages: list[str] = Field(default_factory=list, description="Languages whose content was written")


def parse_target_sections(text: str) -> list[str]:
    """Split on newlines, then commas; trim each item and drop blanks."""
    targets: list[str] = []
    for line in (text or "").splitlines():
        for item in line.split(","):
            item = item.strip()
            if item:
                targets.append(item)
    return targets


class BannerAdminService:
    """Read, merge-save, delete and import banners; invalidates the collection tag on writes."""

    def __init__(
        self,
        storage: BannerRowStoragePort,
        settings: RuntimeSettings,
        invalidator: CacheInvalidatorPort | None = None,
        file_store: Any = None,
        logger: Any = None,
    ) -> None:
        self._storage = storage
        self._settings = settings
        self._invalidator = invalidator
        self._files = file_store
        self._logger = logger

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def _load(self) -> list[Any]:
        """Stored rows by position: a Banner where readable, the raw row otherwise."""
        slots: list[Any] = []
        for i, row in enumerate(self._storage.get_rows()):
            try:
                slots.append(Banner.model_validate(row))
            except ValidationError as e:
                if self._logger:
                    self._logger.warning("banner_row_unreadable", extra={"row": i, "error": str(e)})
                slots.append(row)
        return slots

    def list_banners(self) -> list[Banner | None]:
        """Banners by stored position; None marks a row that cannot be read."""
        return [slot if isinstance(slot, Banner) else None for slot in self._load()]

    def get_banner(self, index: int) -> Banner | None:
        slots = self._load()
        if 0 <= index < len(slots) and isinstance(slots[index], Banner):
            return slots[index]
        return None

    def export_rows(self) -> list[Any]:
        """Every stored row in import format; unreadable rows pass through unchanged."""
        return [slot.model_dump(mode="json") if isinstance(slot, Banner) else slot for slot in self._load()]

    def resolve_editing_language(
        self,
        requested: str | None = None,
        previous: str | None = None,
        current: str | None = None,
    ) -> str:
        """First active candidate of: explicit request, previous choice, current language."""
        active = self._settings.active_languages
        for candidate in (requested, previous, current):
            if candidate and candidate.strip().lower() in active:
                return candidate.strip().lower()
        return active[0]

    def editable_translation(self, banner: Banner | None, language: str) -> dict[str, str]:
        """Form defaults for one language; blank when the translation is missing."""
        translation = banner.translations.get(language) if banner else None
        if translation is None:
            return {"title": "", "body_value": "", "body_format": self._settings.default_body_format}
        return {
            "title": translation.title,
            "body_value": translation.body.value,
            "body_format": translation.body.format or self._settings.default_body_format,
        }

    parse_target_sections = staticmethod(parse_target_sections)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def save(self, submission: BannerFormSubmission) -> SaveResult:
        """Merge one language's edits into the stored banners.

        Other languages' translations and every banner missing from the
        submission are carried over untouched, unreadable rows included.
        """
        form_language = self.resolve_editing_language(submission.language)
        existing = self._load()

        merged: dict[int, Any] = {}
        languages: list[str] = []
        for edit in submission.banners:
            language = self._row_language(edit, form_language)
            base = existing[edit.index] if edit.index < len(existing) else None
            if not isinstance(base, Banner):
                base = None
            banner = self._merge_row(base, edit, language)
            if banner.has_content:
                merged[edit.index] = banner
                if language not in languages:
                    languages.append(language)

        for index, slot in enumerate(existing):
            if index in merged:
                continue
            if not isinstance(slot, Banner) or slot.has_content:
                merged[index] = slot

        rows = [merged[i] for i in sorted(merged)]
        self._persist(rows)
        if self._logger:
            self._logger.info(
                "banners_saved",
                extra={"banners_count": len(rows), "languages": languages},
            )
        return SaveResult(banners_count=len(rows), languages=languages)

    def _row_language(self, edit: BannerEdit, form_language: str) -> str:
        language = (edit.language or form_language).strip().lower()
        if language not in self._settings.active_languages:
            return form_language
        return language

    def _merge_row(self, base: Banner | None, edit: BannerEdit, language: str) -> Banner:
        banner = base.model_copy(deep=True) if base else Banner()
        banner.translations[language] = BannerTranslation(
            title=edit.title.strip(),
            body=BodyText(
                value=edit.body_value,
                format=edit.body_format or self._settings.default_body_format,
            ),
        )
        css_class = edit.css_class.strip()
        if css_class:
            banner.css_class = css_class
        if edit.image:
            banner.image = edit.image
        targets = parse_target_sections(edit.target_sections)
        if targets:
            banner.target_sections = targets
        return banner

    def delete_banner(self, index: int) -> bool:
        rows = list(self._storage.get_rows())
        if not 0 <= index < len(rows):
            return False
        del rows[index]
        self._persist(rows)
        return True

    def replace_all(self, banners: list[Banner | dict]) -> int:
        """Replace the whole list (import). Returns the number stored."""
        if len(banners) > self._settings.max_banners:
            raise BannerValidationError(
                f"too many banners ({len(banners)}; max {self._settings.max_banners})"
            )
        validated: list[Banner] = []
        for i, item in enumerate(banners):
            if isinstance(item, Banner):
                validated.append(item)
                continue
            try:
                validated.append(Banner.model_validate(item))
            except ValueError as e:
                raise BannerValidationError(f"invalid banner at index {i}: {e}") from e
        self._persist(validated)
        return len(validated)

    def upload_image(self, filename: str, data: bytes) -> str:
        """Validate and store an image; returns its file reference."""
        if self._files is None:
            raise BannerValidationError("no file store configured")
        extension = PurePath(filename).suffix.lower().lstrip(".")
        allowed = self._settings.upload_extensions
        if extension not in allowed:
            raise BannerValidationError(
                f"extension {extension or '(none)'!r} not allowed; expected one of {', '.join(allowed)}"
            )
        if not data:
            raise BannerValidationError("empty upload")
        if len(data) > self._settings.max_upload_bytes:
            raise BannerValidationError(
                f"upload too large ({len(data)} bytes; max {self._settings.max_upload_bytes})"
            )
        return self._files.save(filename, data)

    def _persist(self, rows: list[Any]) -> None:
        self._storage.save_rows(rows)
        if self._invalidator is not None:
            self._invalidator.invalidate_tags([self._settings.cache_tag])
