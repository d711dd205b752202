"""ContextBuilder tests: path normalization, alias lookup, bundle and listing detection."""

import logging

import pytest
from pydantic import ValidationError

from sectionbanner.domain.context import ContextBuilder, RequestContext
from sectionbanner.models.requests import ContentItem, RawRequest


class FakeAliasLookup:
    def __init__(self, aliases: dict[str, str] | None = None):
        self.aliases = aliases or {}
        self.calls: list[str] = []

    def alias_for_path(self, path: str) -> str | None:
        self.calls.append(path)
        return self.aliases.get(path)


class BrokenAliasLookup:
    def alias_for_path(self, path: str) -> str | None:
        raise RuntimeError("alias table unavailable")


class TestPathAndAlias:
    def test_path_gets_leading_slash(self):
        ctx = ContextBuilder().build(RawRequest(path="node/5"))
        assert ctx.current_path == "/node/5"

    def test_provided_alias_is_used_without_lookup(self):
        lookup = FakeAliasLookup({"/node/5": "/from-lookup"})
        ctx = ContextBuilder(alias_lookup=lookup).build(RawRequest(path="/node/5", alias="/given"))
        assert ctx.alias_path == "/given"
        assert lookup.calls == []

    def test_alias_looked_up(self):
        lookup = FakeAliasLookup({"/node/5": "/blog/hello"})
        ctx = ContextBuilder(alias_lookup=lookup).build(RawRequest(path="/node/5"))
        assert ctx.alias_path == "/blog/hello"

    def test_alias_equal_to_path_is_dropped(self):
        ctx = ContextBuilder().build(RawRequest(path="/about", alias="/about"))
        assert ctx.alias_path is None

    def test_failed_lookup_means_no_alias(self, caplog):
        with caplog.at_level(logging.WARNING):
            ctx = ContextBuilder(alias_lookup=BrokenAliasLookup()).build(RawRequest(path="/node/5"))
        assert ctx.alias_path is None
        assert "alias_lookup_failed" in caplog.text


class TestBundleDetection:
    def test_bundle_on_canonical_route(self):
        raw = RawRequest(
            path="/node/5",
            route_name="entity.node.canonical",
            node=ContentItem(id="5", bundle="article"),
        )
        ctx = ContextBuilder().build(raw)
        assert ctx.current_bundle == "article"
        assert ctx.is_content_item

    def test_no_bundle_on_edit_route(self):
        raw = RawRequest(
            path="/node/5/edit",
            route_name="entity.node.edit_form",
            node=ContentItem(id="5", bundle="article"),
        )
        assert ContextBuilder().build(raw).current_bundle is None

    def test_no_bundle_for_other_entity_types(self):
        raw = RawRequest(
            path="/node/5",
            route_name="entity.node.canonical",
            node=ContentItem(entity_type="taxonomy_term", id="5", bundle="tags"),
        )
        assert ContextBuilder().build(raw).current_bundle is None


class TestListingDetection:
    def test_listing_route(self):
        ctx = ContextBuilder().build(RawRequest(path="/articles", route_name="view.articles.page_1"))
        assert ctx.current_view_route_id == "view.articles.page_1"
        assert ctx.listing_name == "articles"

    def test_non_listing_route(self):
        ctx = ContextBuilder().build(RawRequest(path="/about", route_name="system.page"))
        assert ctx.current_view_route_id is None
        assert ctx.listing_name is None

    def test_missing_route(self):
        ctx = ContextBuilder().build(RawRequest(path="/about"))
        assert ctx.route_id is None


class TestRequestContext:
    def test_is_frozen(self):
        ctx = RequestContext(current_path="/x")
        with pytest.raises(ValidationError):
            ctx.current_path = "/y"
