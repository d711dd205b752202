"""BannerAdminService tests: merge-on-save, delete, import and uploads."""

import pytest

from sectionbanner.adapters.state_store import MemoryStateStore, StateBannerStorage
from sectionbanner.config.runtime import RuntimeSettings
from sectionbanner.domain.banner import Banner
from sectionbanner.models.requests import BannerEdit, BannerFormSubmission
from sectionbanner.services.admin_service import (
    BannerAdminService,
    BannerValidationError,
    parse_target_sections,
)


class RecordingInvalidator:
    def __init__(self):
        self.calls: list[list[str]] = []

    def invalidate_tags(self, tags: list[str]) -> None:
        self.calls.append(list(tags))


class FakeFileStore:
    def __init__(self):
        self.saved: dict[str, bytes] = {}

    def save(self, filename: str, data: bytes) -> str:
        ref = f"section-banners/{filename}"
        self.saved[ref] = data
        return ref


def _settings(**overrides) -> RuntimeSettings:
    data = dict(
        default_language="en",
        active_languages=["en", "de"],
        max_banners=5,
        max_upload_bytes=10,
    )
    data.update(overrides)
    return RuntimeSettings(_env_file=None, **data)


def _existing() -> list[dict]:
    return [
        {
            "translations": {
                "en": {"title": "Hello", "body": {"value": "en body", "format": "basic_html"}},
                "de": {"title": "Hallo", "body": {"value": "de body", "format": "basic_html"}},
            },
            "image": "section-banners/a.png",
            "target_sections": ["bundle:article"],
            "css_class": "hero",
        },
        {
            "translations": {"en": {"title": "Second"}},
            "target_sections": ["/about"],
        },
    ]


def _make_service(rows=None, **setting_overrides):
    state = MemoryStateStore({"section_banner.banners": _existing() if rows is None else rows})
    storage = StateBannerStorage(state)
    invalidator = RecordingInvalidator()
    files = FakeFileStore()
    service = BannerAdminService(
        storage=storage,
        settings=_settings(**setting_overrides),
        invalidator=invalidator,
        file_store=files,
    )
    return service, storage, invalidator, files


class TestParseTargetSections:
    def test_lines_and_commas(self):
        text = "bundle:article, /news/*\n\n  view.articles  \n,/about,"
        assert parse_target_sections(text) == ["bundle:article", "/news/*", "view.articles", "/about"]

    def test_blank(self):
        assert parse_target_sections("") == []
        assert parse_target_sections(" \n , ") == []


class TestEditingLanguage:
    def test_priority(self):
        service, *_ = _make_service()
        assert service.resolve_editing_language("de", "en", "en") == "de"
        assert service.resolve_editing_language(None, "de", "en") == "de"
        assert service.resolve_editing_language(None, None, "de") == "de"

    def test_inactive_candidates_skipped(self):
        service, *_ = _make_service()
        assert service.resolve_editing_language("fr", "xx", None) == "en"

    def test_editable_translation_defaults(self):
        service, *_ = _make_service()
        banner = service.get_banner(1)
        assert service.editable_translation(banner, "de") == {
            "title": "",
            "body_value": "",
            "body_format": "basic_html",
        }
        assert service.editable_translation(banner, "en")["title"] == "Second"


class TestSave:
    def test_other_languages_preserved(self):
        service, storage, *_ = _make_service()
        submission = BannerFormSubmission(
            language="de",
            banners=[BannerEdit(index=0, title="Neu", body_value="neu")],
        )
        result = service.save(submission)
        banner = storage.get_banners()[0]
        assert banner.translations["de"].title == "Neu"
        assert banner.translations["en"].title == "Hello"
        assert banner.translations["en"].body.value == "en body"
        assert result.banners_count == 2
        assert result.languages == ["de"]

    def test_shared_fields_kept_when_blank(self):
        service, storage, *_ = _make_service()
        service.save(BannerFormSubmission(language="en", banners=[BannerEdit(index=0, title="Hi")]))
        banner = storage.get_banners()[0]
        assert banner.image == "section-banners/a.png"
        assert banner.target_sections == ["bundle:article"]
        assert banner.css_class == "hero"

    def test_shared_fields_updated_when_given(self):
        service, storage, *_ = _make_service()
        edit = BannerEdit(
            index=0,
            title="Hi",
            image="section-banners/b.png",
            target_sections="/news/*\nexcept:page",
            css_class="promo",
        )
        service.save(BannerFormSubmission(language="en", banners=[edit]))
        banner = storage.get_banners()[0]
        assert banner.image == "section-banners/b.png"
        assert banner.target_sections == ["/news/*", "except:page"]
        assert banner.css_class == "promo"

    def test_unsubmitted_banners_preserved(self):
        service, storage, *_ = _make_service()
        service.save(BannerFormSubmission(language="en", banners=[BannerEdit(index=0, title="Hi")]))
        banners = storage.get_banners()
        assert len(banners) == 2
        assert banners[1].translations["en"].title == "Second"

    def test_new_banner_appended(self):
        service, storage, *_ = _make_service()
        edit = BannerEdit(index=2, title="Third", target_sections="/contact")
        result = service.save(BannerFormSubmission(language="en", banners=[edit]))
        assert result.banners_count == 3
        assert storage.get_banners()[2].targets == ["/contact"]

    def test_sparse_indexes_reindexed(self):
        service, storage, *_ = _make_service(rows=[])
        edit = BannerEdit(index=7, title="Only", target_sections="/x")
        service.save(BannerFormSubmission(language="en", banners=[edit]))
        assert len(storage.get_banners()) == 1

    def test_inactive_row_language_falls_back(self):
        service, storage, *_ = _make_service()
        edit = BannerEdit(index=1, language="fr", title="Zweite")
        service.save(BannerFormSubmission(language="de", banners=[edit]))
        banner = storage.get_banners()[1]
        assert "fr" not in banner.translations
        assert banner.translations["de"].title == "Zweite"

    def test_body_format_defaults(self):
        service, storage, *_ = _make_service(default_body_format="plain_text")
        service.save(BannerFormSubmission(language="en", banners=[BannerEdit(index=1, title="x")]))
        assert storage.get_banners()[1].translations["en"].body.format == "plain_text"

    def test_save_invalidates_collection_tag(self):
        service, _, invalidator, _ = _make_service()
        service.save(BannerFormSubmission(language="en", banners=[]))
        assert invalidator.calls == [["section_banner:banners"]]


class TestDeleteAndImport:
    def test_delete_reindexes(self):
        service, storage, invalidator, _ = _make_service()
        assert service.delete_banner(0) is True
        banners = storage.get_banners()
        assert len(banners) == 1
        assert banners[0].targets == ["/about"]
        assert invalidator.calls == [["section_banner:banners"]]

    def test_delete_missing(self):
        service, _, invalidator, _ = _make_service()
        assert service.delete_banner(9) is False
        assert invalidator.calls == []

    def test_replace_all(self):
        service, storage, *_ = _make_service()
        count = service.replace_all([{"target_sections": ["/a"]}, Banner(target_sections=["/b"])])
        assert count == 2
        assert [b.targets for b in storage.get_banners()] == [["/a"], ["/b"]]

    def test_replace_all_limit(self):
        service, *_ = _make_service(max_banners=1)
        with pytest.raises(BannerValidationError):
            service.replace_all([{}, {}])

    def test_replace_all_invalid_row(self):
        service, storage, *_ = _make_service()
        with pytest.raises(BannerValidationError):
            service.replace_all([{"translations": "nope"}])
        assert len(storage.get_banners()) == 2


def _rows_with_unreadable() -> list:
    return [
        {"translations": "broken", "target_sections": ["/legacy"]},
        {"translations": {"en": {"title": "Keep"}}, "target_sections": ["/about"]},
    ]


class TestUnreadableRows:
    def test_positions_kept_on_read(self):
        service, *_ = _make_service(rows=_rows_with_unreadable())
        assert service.get_banner(0) is None
        assert service.get_banner(1).translations["en"].title == "Keep"
        listed = service.list_banners()
        assert listed[0] is None
        assert listed[1].targets == ["/about"]

    def test_delete_targets_stored_position(self):
        service, storage, *_ = _make_service(rows=_rows_with_unreadable())
        assert service.delete_banner(0) is True
        assert [b.targets for b in storage.get_banners()] == [["/about"]]
        assert len(storage.get_rows()) == 1

    def test_delete_keeps_unreadable_row(self):
        service, storage, *_ = _make_service(rows=_rows_with_unreadable())
        service.delete_banner(1)
        assert storage.get_rows() == [{"translations": "broken", "target_sections": ["/legacy"]}]

    def test_save_merges_into_stored_position(self):
        service, storage, *_ = _make_service(rows=_rows_with_unreadable())
        service.save(BannerFormSubmission(language="de", banners=[BannerEdit(index=1, title="Behalten")]))
        rows = storage.get_rows()
        assert rows[0] == {"translations": "broken", "target_sections": ["/legacy"]}
        assert rows[1]["translations"]["en"]["title"] == "Keep"
        assert rows[1]["translations"]["de"]["title"] == "Behalten"

    def test_save_over_unreadable_row_replaces_it(self):
        service, storage, *_ = _make_service(rows=_rows_with_unreadable())
        edit = BannerEdit(index=0, title="Fresh", target_sections="/legacy")
        service.save(BannerFormSubmission(language="en", banners=[edit]))
        banners = storage.get_banners()
        assert [b.label("en") for b in banners] == ["Fresh", "Keep"]

    def test_export_passes_unreadable_rows_through(self):
        service, *_ = _make_service(rows=_rows_with_unreadable())
        exported = service.export_rows()
        assert exported[0] == {"translations": "broken", "target_sections": ["/legacy"]}
        assert exported[1]["target_sections"] == ["/about"]

    def test_null_title_and_format_are_readable(self):
        rows = [
            {"translations": {"en": {"title": None, "body": {"value": None, "format": None}}}, "target_sections": ["/legacy"]},
            {"translations": {"en": {"title": "Keep"}}, "target_sections": ["/about"]},
        ]
        service, storage, *_ = _make_service(rows=rows)
        banner = service.get_banner(0)
        assert banner.translations["en"].title == ""
        assert banner.translations["en"].body.format == "basic_html"
        service.delete_banner(0)
        assert [b.label("en") for b in storage.get_banners()] == ["Keep"]


class TestUpload:
    def test_upload_stores_file(self):
        service, _, _, files = _make_service()
        ref = service.upload_image("hero.PNG", b"12345")
        assert ref == "section-banners/hero.PNG"
        assert files.saved[ref] == b"12345"

    def test_bad_extension(self):
        service, *_ = _make_service()
        with pytest.raises(BannerValidationError):
            service.upload_image("script.svg", b"x")

    def test_too_large(self):
        service, *_ = _make_service()
        with pytest.raises(BannerValidationError):
            service.upload_image("a.png", b"x" * 11)

    def test_empty(self):
        service, *_ = _make_service()
        with pytest.raises(BannerValidationError):
            service.upload_image("a.png", b"")
