"""BannerService: select, resolve and prepare the banner for one request."""

from __future__ import annotations

import json
from typing import Any

from ..domain.banner import Banner
from ..domain.cache_metadata import CacheMetadataCalculator, apply_token_metadata
from ..domain.context import ContextBuilder, RequestContext
from ..domain.patterns import PatternMatcher
from ..domain.selector import BannerSelector, Selection
from ..domain.suggestions import css_class_suggestion, section_suggestion, template_suggestions
from ..domain.translation import TranslationResolver
from ..models.requests import RawRequest
from ..models.responses import BANNER_CACHE_CONTEXTS, BannerRender
from ..ports.files import FileLookupPort
from ..ports.id_gen import RequestIdProvider, UuidRequestIdProvider
from ..ports.rich_text import RichTextRendererPort
from ..ports.storage import BannerStoragePort
from ..ports.tokens import TokenSubstitutionPort
from ..adapters.render_cache import TagAwareMemoryCache

_NO_MATCH = {"render": None}


class BannerService:
    """Orchestrates the render pipeline: context, selection, content, cache info."""

    def __init__(
        self,
        storage: BannerStoragePort,
        context_builder: ContextBuilder | None = None,
        selector: BannerSelector | None = None,
        resolver: TranslationResolver | None = None,
        cache_calculator: CacheMetadataCalculator | None = None,
        token_substitution: TokenSubstitutionPort | None = None,
        renderer: RichTextRendererPort | None = None,
        file_lookup: FileLookupPort | None = None,
        request_id_provider: RequestIdProvider | None = None,
        render_cache: TagAwareMemoryCache | None = None,
        default_language: str = "en",
        logger: Any = None,
    ) -> None:
        self._storage = storage
        self._contexts = context_builder or ContextBuilder()
        self._selector = selector or BannerSelector()
        self._resolver = resolver or TranslationResolver()
        self._cache_info = cache_calculator or CacheMetadataCalculator(file_lookup=file_lookup)
        self._tokens = token_substitution
        self._renderer = renderer
        self._files = file_lookup
        self._req_id = request_id_provider or UuidRequestIdProvider()
        self._render_cache = render_cache
        self._default_language = default_language
        self._logger = logger

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self, raw: RawRequest) -> BannerRender | None:
        """Return render data for the matching banner, or None to emit nothing."""
        request_id = self._req_id.new_request_id()
        if self._logger:
            self._logger.info(
                "render_start",
                extra={"trace_id": request_id, "path": raw.path, "route": raw.route_name},
            )

        banners = self._storage.get_banners()
        ctx = self._contexts.build(raw)
        selection = self._selector.select(banners, ctx)
        if selection is None:
            if self._logger:
                self._logger.info(
                    "render_no_match",
                    extra={"trace_id": request_id, "banners_count": len(banners)},
                )
            return None

        result = self._build_render(selection, ctx, raw, request_id)
        if self._logger:
            self._logger.info(
                "render_done",
                extra={
                    "trace_id": request_id,
                    "banner_index": selection.index,
                    "matched_pattern": selection.matched_pattern,
                    "matched_kind": selection.matched_kind.value,
                },
            )
        return result

    def render_cached(self, raw: RawRequest) -> BannerRender | None:
        """Render, reusing output cached under the same cache contexts until its tags are invalidated."""
        return self.render_cached_lookup(raw)[0]

    def render_cached_lookup(self, raw: RawRequest) -> tuple[BannerRender | None, bool | None]:
        """Like render_cached, also reporting a cache hit (None when caching is off)."""
        if self._render_cache is None:
            return self.render(raw), None

        key = self.cache_key(raw)
        cached = self._render_cache.get(key)
        if cached is not None:
            request_id = self._req_id.new_request_id()
            if self._logger:
                self._logger.info("render_cache_hit", extra={"trace_id": request_id, "cache_key": key})
            render = cached["render"]
            if render is not None:
                render = render.model_copy(update={"request_id": request_id})
            return render, True

        result = self.render(raw)
        if result is None:
            self._render_cache.set(key, _NO_MATCH, tags=[self._cache_info.collection_tag])
        elif self._cacheable(result):
            self._render_cache.set(key, {"render": result}, tags=result.cache.tags, max_age=result.cache.max_age)
        return result, False

    @staticmethod
    def _cacheable(result: BannerRender) -> bool:
        # The key only covers the block contexts; output varying further is never stored.
        extra_contexts = set(result.cache.contexts) - set(BANNER_CACHE_CONTEXTS)
        return result.cache.max_age != 0 and not extra_contexts

    def cache_key(self, raw: RawRequest) -> str:
        """Key varying by route, path, interface language and content language."""
        language = raw.language or self._default_language
        key = {
            "route": raw.route_name or "",
            "url.path": raw.path,
            "languages:language_interface": language,
            "languages:language_content": raw.content_language or language,
        }
        return json.dumps(key, sort_keys=True)

    def _build_render(
        self,
        selection: Selection,
        ctx: RequestContext,
        raw: RawRequest,
        request_id: str,
    ) -> BannerRender:
        banner = selection.banner
        content = self._resolver.resolve(banner, raw.language or self._default_language, self._default_language)
        token_data = self.token_data(raw)

        title = self._substitute(content.title, token_data, request_id) if content.title else ""
        body_raw = self._substitute(content.body.value, token_data, request_id) if content.body.value else ""
        body = None
        if body_raw:
            body = self._renderer.render(body_raw, content.body.format) if self._renderer else body_raw

        section = section_suggestion(selection.matched_pattern)
        css = css_class_suggestion(banner.css_class)
        return BannerRender(
            banner_index=selection.index,
            language=content.language,
            title=title or None,
            body=body,
            body_raw=body_raw,
            body_format=content.body.format,
            image_url=self._image_url(banner, request_id),
            css_class=banner.css_class,
            css_class_suggestion=css,
            matched_pattern=selection.matched_pattern,
            matched_kind=selection.matched_kind.value,
            section_suggestion=section,
            template_suggestions=template_suggestions(section, css),
            cache=apply_token_metadata(
                self._cache_info.compute(selection, ctx),
                content.title,
                content.body.value,
            ),
            request_id=request_id,
        )

    @staticmethod
    def token_data(raw: RawRequest) -> dict[str, Any]:
        data: dict[str, Any] = {
            "current-page": {"url": raw.page_url, "title": raw.page_title, "route": raw.route_name or ""},
        }
        if raw.node is not None:
            data["node"] = raw.node
        if raw.user is not None:
            data["current-user"] = raw.user
        return data

    def _substitute(self, text: str, token_data: dict[str, Any], request_id: str) -> str:
        if self._tokens is None:
            return text
        try:
            return self._tokens.replace(text, token_data)
        except Exception as e:
            self._enrichment_failed("tokens", e, request_id)
            return text

    def _image_url(self, banner: Banner, request_id: str) -> str | None:
        if not banner.image or self._files is None:
            return None
        try:
            return self._files.resolve_url(banner.image)
        except Exception as e:
            self._enrichment_failed("image", e, request_id)
            return None

    def _enrichment_failed(self, what: str, error: Exception, request_id: str) -> None:
        if self._logger:
            self._logger.warning(
                "enrichment_failed",
                extra={"trace_id": request_id, "enrichment": what, "error": str(error)},
            )

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def explain(self, raw: RawRequest) -> dict[str, Any]:
        """Audit trace: the built context and a decision per banner."""
        banners = self._storage.get_banners()
        ctx = self._contexts.build(raw)
        selection = self._selector.select(banners, ctx)
        return {
            "context": ctx.model_dump(),
            "listing_name": ctx.listing_name,
            "is_content_item": ctx.is_content_item,
            "banners_count": len(banners),
            "selected_index": selection.index if selection else None,
            "matched_pattern": selection.matched_pattern if selection else None,
            "matched_kind": selection.matched_kind.value if selection else None,
            "decisions": self._selector.decisions(banners, ctx),
            "cache_tags": self._cache_info.block_tags(banners),
        }

    def match_pattern(self, pattern: str, raw: RawRequest, matcher: PatternMatcher | None = None) -> dict[str, Any]:
        """Evaluate a single pattern against a request (no banners involved)."""
        matcher = matcher or PatternMatcher()
        ctx = self._contexts.build(raw)
        kind = matcher.match_kind(pattern, ctx)
        return {
            "pattern": pattern,
            "reads_as": matcher.classify(pattern),
            "matched": kind is not None,
            "matched_kind": kind.value if kind else None,
            "context": ctx.model_dump(),
        }
