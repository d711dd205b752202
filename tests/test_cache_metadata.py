"""Cache metadata tests: collection tag, image tags and fixed contexts."""

from sectionbanner.domain.banner import Banner
from sectionbanner.domain.cache_metadata import (
    BANNER_CACHE_CONTEXTS,
    CACHE_PERMANENT,
    CacheMetadata,
    CacheMetadataCalculator,
    apply_token_metadata,
    merge_tags,
    token_types,
)
from sectionbanner.domain.context import RequestContext
from sectionbanner.domain.patterns import PatternKind
from sectionbanner.domain.selector import Selection

CTX = RequestContext(current_path="/about")


class FakeFileLookup:
    def __init__(self, known: set[str]):
        self.known = known

    def resolve_url(self, ref: str) -> str | None:
        return f"https://files.test/{ref}" if ref in self.known else None

    def cache_tags(self, ref: str) -> list[str]:
        return [f"file:{ref}"] if ref in self.known else []


class BrokenFileLookup:
    def resolve_url(self, ref: str) -> str | None:
        raise OSError("disk gone")

    def cache_tags(self, ref: str) -> list[str]:
        raise OSError("disk gone")


def _selection(image: str | None = None) -> Selection:
    banner = Banner(target_sections=["/about"], image=image)
    return Selection(index=0, banner=banner, matched_pattern="/about", matched_kind=PatternKind.path)


class TestCompute:
    def test_no_selection_still_tagged(self):
        meta = CacheMetadataCalculator().compute(None, CTX)
        assert meta.tags == ["section_banner:banners"]
        assert meta.contexts == list(BANNER_CACHE_CONTEXTS)
        assert meta.max_age == CACHE_PERMANENT

    def test_image_tags_added(self):
        calc = CacheMetadataCalculator(file_lookup=FakeFileLookup({"section-banners/a.png"}))
        meta = calc.compute(_selection("section-banners/a.png"), CTX)
        assert meta.tags == ["section_banner:banners", "file:section-banners/a.png"]

    def test_missing_image_adds_nothing(self):
        calc = CacheMetadataCalculator(file_lookup=FakeFileLookup(set()))
        meta = calc.compute(_selection("gone.png"), CTX)
        assert meta.tags == ["section_banner:banners"]

    def test_failing_file_lookup_is_tolerated(self):
        calc = CacheMetadataCalculator(file_lookup=BrokenFileLookup())
        meta = calc.compute(_selection("a.png"), CTX)
        assert meta.tags == ["section_banner:banners"]

    def test_custom_collection_tag(self):
        calc = CacheMetadataCalculator(collection_tag="banners:site2")
        assert calc.compute(None, CTX).tags == ["banners:site2"]
        assert calc.collection_tag == "banners:site2"

    def test_contexts_cover_route_path_and_languages(self):
        assert set(BANNER_CACHE_CONTEXTS) == {
            "route",
            "url.path",
            "languages:language_interface",
            "languages:language_content",
        }


class TestBlockTags:
    def test_tags_for_every_image_without_duplicates(self):
        calc = CacheMetadataCalculator(file_lookup=FakeFileLookup({"a.png", "b.png"}))
        banners = [Banner(image="a.png"), Banner(image="b.png"), Banner(image="a.png"), Banner()]
        assert calc.block_tags(banners) == ["section_banner:banners", "file:a.png", "file:b.png"]


class TestMergeTags:
    def test_keeps_first_seen_order(self):
        assert merge_tags(["a", "b"], ["b", "c"], ["a"]) == ["a", "b", "c"]


class TestTokenMetadata:
    def test_token_types(self):
        assert token_types("Hi [current-user:name]", "[date:custom:Y-m-d] [node:title]", "") == {
            "current-user",
            "date",
            "node",
        }

    def test_plain_text_unchanged(self):
        metadata = CacheMetadata(tags=["t"])
        assert apply_token_metadata(metadata, "Welcome", "[node:title]") is metadata

    def test_user_tokens_add_user_context(self):
        metadata = apply_token_metadata(CacheMetadata(tags=["t"]), "Hi [current-user:name]")
        assert metadata.contexts == [*BANNER_CACHE_CONTEXTS, "user"]
        assert metadata.max_age == CACHE_PERMANENT

    def test_date_tokens_disable_caching(self):
        metadata = apply_token_metadata(CacheMetadata(tags=["t"]), "", "Today is [date:custom:F j, Y]")
        assert metadata.max_age == 0
        assert metadata.tags == ["t"]
