"""Tests that each MCP surface exposes only its allowed tool set.

No write tools (save, delete, import, upload) may be registered on the Engine.
"""

import base64
import json

import pytest

from sectionbanner.adapters.render_cache import TagAwareMemoryCache
from sectionbanner.adapters.state_store import MemoryStateStore, StateBannerStorage
from sectionbanner.config.runtime import RuntimeSettings
from sectionbanner.interface.mcp import tools as tools_module
from sectionbanner.interface.mcp.observability import metrics_snapshot, reset_metrics
from sectionbanner.interface.mcp.server import create_server
from sectionbanner.interface.mcp.tools import ENGINE_ALLOWED_TOOLS, STUDIO_ALLOWED_TOOLS
from sectionbanner.services.admin_service import BannerAdminService
from sectionbanner.services.banner_service import BannerService

# Tools that must NEVER appear on the Engine
FORBIDDEN_ENGINE_TOOLS = {
    "banners_save",
    "banners_delete",
    "banners_import",
    "banners_export",
    "images_upload",
    "banners_list",
    "banners_get",
}


def _get_tool_names(server) -> set[str]:
    """Extract registered tool names from a FastMCP server."""
    # FastMCP stores tools in _tool_manager._tools dict
    return set(server._tool_manager._tools.keys())


def _call(server, name: str, **kwargs) -> object:
    return json.loads(server._tool_manager._tools[name].fn(**kwargs))


class FakeFileStore:
    def save(self, filename: str, data: bytes) -> str:
        return f"section-banners/{filename}"


@pytest.fixture
def storage():
    state = MemoryStateStore({
        "section_banner.banners": [
            {"translations": {"en": {"title": "News"}}, "target_sections": ["/news/*"]},
        ]
    })
    return StateBannerStorage(state)


@pytest.fixture
def wired(monkeypatch, storage):
    settings = RuntimeSettings(_env_file=None)
    monkeypatch.setattr(tools_module, "_get_banner_service", lambda: BannerService(storage=storage))
    monkeypatch.setattr(
        tools_module,
        "_get_admin_service",
        lambda: BannerAdminService(storage=storage, settings=settings, file_store=FakeFileStore()),
    )
    return storage


class TestToolSets:
    def test_engine_exposes_only_allowed_tools(self):
        tool_names = _get_tool_names(create_server("engine"))
        assert tool_names == ENGINE_ALLOWED_TOOLS

    def test_engine_has_no_write_tools(self):
        overlap = _get_tool_names(create_server("engine")) & FORBIDDEN_ENGINE_TOOLS
        assert not overlap, f"Forbidden tools found on Engine: {overlap}"

    def test_studio_exposes_admin_tools(self):
        tool_names = _get_tool_names(create_server("studio"))
        assert tool_names == STUDIO_ALLOWED_TOOLS
        assert "banners_render" not in tool_names

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            create_server("admin")


class TestEngineTools:
    def test_render_match(self, wired):
        result = _call(create_server("engine"), "banners_render", path="/news/today", language="en")
        banner = result["banner"]
        assert banner["title"] == "News"
        assert banner["matched_pattern"] == "/news/*"
        assert "body_raw" not in banner

    def test_render_no_match(self, wired):
        result = _call(create_server("engine"), "banners_render", path="/about")
        assert result == {"banner": None}

    def test_render_cache_hit_rate_in_metrics(self, monkeypatch, storage):
        cache = TagAwareMemoryCache()
        monkeypatch.setattr(tools_module, "_get_banner_service", lambda: BannerService(storage=storage, render_cache=cache))
        reset_metrics()
        server = create_server("engine")
        first = _call(server, "banners_render", path="/news/today")
        second = _call(server, "banners_render", path="/news/today")
        assert second["banner"]["request_id"] != first["banner"]["request_id"]
        snapshot = metrics_snapshot()
        assert snapshot["render_cache"] == {"hits": 1, "misses": 1, "hit_rate": 0.5}
        assert snapshot["tool_calls"]["banners_render"] == 2
        reset_metrics()

    def test_explain(self, wired):
        trace = _call(create_server("engine"), "banners_explain", path="/about")
        assert trace["selected_index"] is None
        assert trace["decisions"][0]["reason"] == "no_match"

    def test_match_pattern(self, wired):
        result = _call(
            create_server("engine"),
            "banners_match_pattern",
            pattern="bundle:article",
            path="/node/1",
            route_name="entity.node.canonical",
            bundle="article",
        )
        assert result["matched_kind"] == "bundle"

    def test_validate(self):
        result = _call(create_server("engine"), "banners_validate", patterns=["except:"])
        assert result["valid"] is False


class TestStudioTools:
    def test_list_and_get(self, wired):
        server = create_server("studio")
        listing = _call(server, "banners_list")
        assert listing[0]["label"] == "News"
        assert listing[0]["targets"] == ["/news/*"]
        assert _call(server, "banners_get", index=0)["banner"]["target_sections"] == ["/news/*"]
        assert "error" in _call(server, "banners_get", index=5)

    def test_save_merges(self, wired):
        server = create_server("studio")
        submission = {"language": "en", "banners": [{"index": 1, "title": "Events", "target_sections": "/events"}]}
        result = _call(server, "banners_save", submission_json=json.dumps(submission))
        assert result["banners_count"] == 2
        assert [b.targets for b in wired.get_banners()] == [["/news/*"], ["/events"]]

    def test_save_rejects_bad_json(self, wired):
        result = _call(create_server("studio"), "banners_save", submission_json="{}")
        assert result["error"] == "invalid submission_json"

    def test_import_export_delete(self, wired):
        server = create_server("studio")
        payload = json.dumps([{"target_sections": ["/a"]}, {"target_sections": ["/b"]}])
        assert _call(server, "banners_import", banners_json=payload) == {"imported": 2}
        assert len(_call(server, "banners_export")) == 2
        assert _call(server, "banners_delete", index=0) == {"deleted": 0}
        assert wired.get_banners()[0].targets == ["/b"]

    def test_import_requires_array(self, wired):
        result = _call(create_server("studio"), "banners_import", banners_json='{"a": 1}')
        assert "error" in result

    def test_upload(self, wired):
        content = base64.b64encode(b"png-bytes").decode()
        result = _call(create_server("studio"), "images_upload", filename="a.png", content_base64=content)
        assert result == {"image": "section-banners/a.png"}

    def test_upload_bad_base64(self, wired):
        result = _call(create_server("studio"), "images_upload", filename="a.png", content_base64="!!!")
        assert result["error"] == "invalid content_base64"
