"""Tool registry for MCP servers.

Request shaping (path/target limits); response allowlists (field-level).
Every tool returns a JSON string.
"""

from __future__ import annotations

import base64
import binascii
import json
import time
from typing import Any

from pydantic import ValidationError

from .observability import log_tool_invocation, metrics_snapshot, record_render_cache
from ...config.runtime import get_settings
from ...domain.banner import Banner
from ...domain.match_semantics import ALL_RULES
from ...models.requests import BannerFormSubmission, ContentItem, RawRequest
from ...services.admin_service import BannerValidationError

# ---------------------------------------------------------------------------
# Response allowlists (field-level)
# ---------------------------------------------------------------------------
ALLOWED_RENDER_KEYS = frozenset({
    "banner_index",
    "language",
    "title",
    "body",
    "image_url",
    "css_class",
    "matched_pattern",
    "matched_kind",
    "section_suggestion",
    "template_suggestions",
    "cache",
    "request_id",
})
ALLOWED_BANNER_SUMMARY_KEYS = frozenset({"index", "label", "languages", "targets", "image", "css_class"})

_MAX_PATH_LEN = 2048
_MAX_PATTERN_LEN = 512


def _shape_render(render: Any) -> dict | None:
    if render is None:
        return None
    d = render.model_dump() if hasattr(render, "model_dump") else render
    return {k: d[k] for k in ALLOWED_RENDER_KEYS if k in d}


def _summarize_banner(index: int, banner: Banner, language: str) -> dict:
    summary = {
        "index": index,
        "label": banner.label(language),
        "languages": sorted(banner.translations),
        "targets": banner.targets,
        "image": banner.image,
        "css_class": banner.css_class,
    }
    return {k: summary[k] for k in ALLOWED_BANNER_SUMMARY_KEYS}


def _raw_request(
    path: str,
    route_name: str | None = None,
    bundle: str | None = None,
    node_id: str | None = None,
    alias: str | None = None,
    language: str | None = None,
    content_language: str | None = None,
    page_title: str = "",
    page_url: str = "",
) -> RawRequest:
    node = None
    if bundle:
        node = ContentItem(id=node_id or "", bundle=bundle)
    return RawRequest(
        path=path[:_MAX_PATH_LEN],
        route_name=route_name,
        alias=alias[:_MAX_PATH_LEN] if alias else None,
        node=node,
        language=language,
        content_language=content_language,
        page_title=page_title,
        page_url=page_url,
    )


def _get_banner_service():
    from ...wiring import build_banner_service
    return build_banner_service()


def _get_admin_service():
    from ...wiring import build_admin_service
    return build_admin_service()


# ---------------------------------------------------------------------------
# Engine tools
# ---------------------------------------------------------------------------
ENGINE_ALLOWED_TOOLS = frozenset({
    "banners_render",
    "banners_explain",
    "banners_match_pattern",
    "banners_validate",
    "banners_capabilities",
    "banners_health",
})


def register_engine_tools(mcp):
    """Register Engine (render / read-only) tools with request shaping and response allowlist."""

    @mcp.tool()
    def banners_render(
        path: str,
        route_name: str | None = None,
        bundle: str | None = None,
        node_id: str | None = None,
        alias: str | None = None,
        language: str | None = None,
        content_language: str | None = None,
        page_title: str = "",
        page_url: str = "",
    ) -> str:
        """Select and render the banner for a request (read-only).

        Args:
            path: Internal path of the current page (e.g. '/node/5')
            route_name: Route id (e.g. 'entity.node.canonical', 'view.articles.page_1')
            bundle: Content type of the routed content item, if any
            node_id: Id of the routed content item, if any
            alias: Path alias, if already known; otherwise looked up
            language: Interface language code
            content_language: Content language code
            page_title: Current page title (for [current-page:title])
            page_url: Current page URL (for [current-page:url])

        Returns:
            JSON with banner (title, body, image_url, matched_pattern, template_suggestions, cache) or null
        """
        t0 = time.monotonic()
        raw = _raw_request(path, route_name, bundle, node_id, alias, language, content_language, page_title, page_url)
        render, cache_hit = _get_banner_service().render_cached_lookup(raw)
        record_render_cache(cache_hit)
        latency_ms = (time.monotonic() - t0) * 1000
        log_tool_invocation(
            "banners_render",
            render.request_id if render else None,
            latency_ms,
            extra={"matched": render is not None, "cache_hit": cache_hit},
        )
        return json.dumps({"banner": _shape_render(render)}, indent=2)

    @mcp.tool()
    def banners_explain(
        path: str,
        route_name: str | None = None,
        bundle: str | None = None,
        alias: str | None = None,
        language: str | None = None,
    ) -> str:
        """Explain which banner a request selects and why every other banner did not.

        Args:
            path: Internal path of the current page
            route_name: Route id
            bundle: Content type of the routed content item, if any
            alias: Path alias, if already known
            language: Interface language code

        Returns:
            JSON trace with context, per-banner decisions, selected index and cache tags
        """
        t0 = time.monotonic()
        raw = _raw_request(path, route_name, bundle, alias=alias, language=language)
        trace = _get_banner_service().explain(raw)
        latency_ms = (time.monotonic() - t0) * 1000
        log_tool_invocation("banners_explain", None, latency_ms, extra={"selected_index": trace["selected_index"]})
        return json.dumps(trace, indent=2)

    @mcp.tool()
    def banners_match_pattern(
        pattern: str,
        path: str,
        route_name: str | None = None,
        bundle: str | None = None,
        alias: str | None = None,
    ) -> str:
        """Test a single target pattern against a request, without any stored banners.

        Args:
            pattern: Target pattern (e.g. 'bundle:article', '/news/*', 'view.articles')
            path: Internal path of the page
            route_name: Route id
            bundle: Content type of the routed content item, if any
            alias: Path alias, if already known

        Returns:
            JSON with matched, matched_kind, reads_as and the built context
        """
        raw = _raw_request(path, route_name, bundle, alias=alias)
        result = _get_banner_service().match_pattern(pattern[:_MAX_PATTERN_LEN], raw)
        return json.dumps(result, indent=2)

    @mcp.tool()
    def banners_validate(patterns: list[str]) -> str:
        """Validate target patterns before saving them (read-only).

        Args:
            patterns: Target patterns of one banner, in order

        Returns:
            JSON with valid, errors, warnings and how each pattern will be read
        """
        from ..validation import validate_patterns

        t0 = time.monotonic()
        result = validate_patterns([p[:_MAX_PATTERN_LEN] for p in patterns])
        latency_ms = (time.monotonic() - t0) * 1000
        log_tool_invocation("banners_validate", None, latency_ms)
        return json.dumps(result.to_dict(), indent=2)

    @mcp.tool()
    def banners_capabilities() -> str:
        """Supported pattern kinds, languages, body formats and matching rules."""
        from ...adapters.rich_text import FormatRenderer
        from ...domain.patterns import PatternKind

        settings = get_settings()
        return json.dumps({
            "pattern_kinds": [kind.value for kind in PatternKind],
            "exclusion_prefix": "except:",
            "languages": settings.active_languages,
            "default_language": settings.default_language,
            "body_formats": FormatRenderer().formats,
            "rules": list(ALL_RULES),
            "render_cache": settings.render_cache_enabled,
        })

    @mcp.tool()
    def banners_health() -> str:
        """Liveness/readiness: banner state and files directory readable."""
        try:
            from ...ops.smoke_check import run_smoke_check
            result = run_smoke_check()
            result["metrics"] = metrics_snapshot()
            return json.dumps(result)
        except Exception as e:
            return json.dumps({"ok": False, "error": str(e)})


# ---------------------------------------------------------------------------
# Studio tools
# ---------------------------------------------------------------------------
STUDIO_ALLOWED_TOOLS = frozenset({
    "banners_list",
    "banners_get",
    "banners_save",
    "banners_delete",
    "banners_import",
    "banners_export",
    "images_upload",
})


def register_studio_tools(mcp):
    """Register Studio (admin) tools with response allowlists."""

    @mcp.tool()
    def banners_list(language: str | None = None) -> str:
        """List stored banners in display order.

        Indexes are stored positions; unreadable rows are left out.

        Args:
            language: Language used for labels (default: site default)

        Returns:
            JSON array of banner summaries (index, label, languages, targets, image, css_class)
        """
        from .auth import require_studio_scope
        require_studio_scope()
        svc = _get_admin_service()
        lang = svc.resolve_editing_language(language)
        banners = enumerate(svc.list_banners())
        return json.dumps([_summarize_banner(i, b, lang) for i, b in banners if b is not None])

    @mcp.tool()
    def banners_get(index: int) -> str:
        """Get one banner with all translations.

        Args:
            index: Position of the banner

        Returns:
            JSON banner or an error
        """
        from .auth import require_studio_scope
        require_studio_scope()
        banner = _get_admin_service().get_banner(index)
        if banner is None:
            return json.dumps({"error": "not found", "index": index})
        return json.dumps({"index": index, "banner": banner.model_dump(mode="json")})

    @mcp.tool()
    def banners_save(submission_json: str) -> str:
        """Save one language's edits; other languages and untouched banners are kept.

        Args:
            submission_json: JSON object {"language": "en", "banners": [{"index": 0, "title": ..., ...}]}

        Returns:
            JSON with banners_count and saved languages
        """
        from .auth import require_studio_scope
        require_studio_scope()
        try:
            submission = BannerFormSubmission.model_validate_json(submission_json)
        except ValidationError as e:
            return json.dumps({"error": "invalid submission_json", "detail": str(e)})
        result = _get_admin_service().save(submission)
        return json.dumps(result.model_dump())

    @mcp.tool()
    def banners_delete(index: int) -> str:
        """Delete one banner; later banners move up.

        Args:
            index: Position of the banner

        Returns:
            JSON confirmation
        """
        from .auth import require_studio_scope
        require_studio_scope()
        if not _get_admin_service().delete_banner(index):
            return json.dumps({"error": "not found", "index": index})
        return json.dumps({"deleted": index})

    @mcp.tool()
    def banners_import(banners_json: str) -> str:
        """Replace the whole banner list. Size limit from config.

        Args:
            banners_json: JSON array of banner objects

        Returns:
            JSON with imported count
        """
        from .auth import require_studio_scope
        require_studio_scope()
        try:
            raw = json.loads(banners_json)
        except json.JSONDecodeError as e:
            return json.dumps({"error": "invalid banners_json", "detail": str(e)})
        if not isinstance(raw, list):
            return json.dumps({"error": "banners_json must be a JSON array"})
        try:
            count = _get_admin_service().replace_all(raw)
        except BannerValidationError as e:
            return json.dumps({"error": str(e)})
        return json.dumps({"imported": count})

    @mcp.tool()
    def banners_export() -> str:
        """Export the whole banner list in import format."""
        from .auth import require_studio_scope
        require_studio_scope()
        return json.dumps(_get_admin_service().export_rows(), indent=2)

    @mcp.tool()
    def images_upload(filename: str, content_base64: str) -> str:
        """Upload a banner image.

        Args:
            filename: Original file name; the extension must be allowed
            content_base64: File content, base64 encoded

        Returns:
            JSON with the stored file reference
        """
        from .auth import require_studio_scope
        require_studio_scope()
        try:
            data = base64.b64decode(content_base64, validate=True)
        except (binascii.Error, ValueError) as e:
            return json.dumps({"error": "invalid content_base64", "detail": str(e)})
        try:
            ref = _get_admin_service().upload_image(filename, data)
        except BannerValidationError as e:
            return json.dumps({"error": str(e)})
        return json.dumps({"image": ref})
