"""Template suggestion tests."""

import pytest

from sectionbanner.domain.suggestions import (
    THEME_HOOK,
    css_class_suggestion,
    section_suggestion,
    template_suggestions,
)


class TestSectionSuggestion:
    @pytest.mark.parametrize(
        "pattern, expected",
        [
            ("bundle:article", "article"),
            ("node.type.article", "article"),
            ("/news/*", "news"),
            ("view.articles", "articles"),
            ("articles", "articles"),
            ("/node/*", "node"),
            ("Section_Banner.Settings", "section_banner_settings"),
        ],
    )
    def test_sanitized(self, pattern, expected):
        assert section_suggestion(pattern) == expected

    @pytest.mark.parametrize(
        "pattern, expected",
        [
            ("/news/view_archive", "news_archive"),
            ("/shop/bundle_deals/*", "shop_deals"),
            ("preview_x", "prex"),
        ],
    )
    def test_prefixes_removed_anywhere(self, pattern, expected):
        assert section_suggestion(pattern) == expected

    def test_none(self):
        assert section_suggestion(None) is None
        assert section_suggestion("") is None


class TestCssClassSuggestion:
    def test_lowercased_and_sanitized(self):
        assert css_class_suggestion("Hero Wide") == "hero_wide"
        assert css_class_suggestion("promo-box") == "promo-box"

    def test_empty(self):
        assert css_class_suggestion("") == ""


class TestTemplateSuggestions:
    def test_base_only(self):
        assert template_suggestions(None) == [THEME_HOOK]

    def test_all_variants_least_specific_first(self):
        assert template_suggestions("news", "hero") == [
            "section_banner_block",
            "section_banner_block__hero",
            "section_banner_block__news",
            "section_banner_block__news__hero",
        ]
