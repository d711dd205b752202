"""Pydantic-based runtime settings for the banner engine and MCP servers.

Loads from environment variables (with optional .env file).
Invalid values fail fast at first access.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings


class McpMode(str, Enum):
    engine = "engine"
    studio = "studio"


class RuntimeSettings(BaseSettings):
    """All configuration for the banner runtime, validated at startup."""

    model_config = {
        "env_prefix": "SECTION_BANNER_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    # --- Server mode ---
    mcp_mode: McpMode = Field(
        default=McpMode.engine,
        description="Which MCP surface to start: 'engine' (render, read-only) or 'studio' (admin)",
    )

    # --- State storage ---
    state_path: str = Field(default="data/state.json", description="JSON key-value state file")
    state_key: str = Field(default="section_banner.banners", description="State key holding the banner list")
    cache_tag: str = Field(
        default="section_banner:banners",
        description="Collection cache tag, invalidated on every banner write",
    )
    aliases_path: str | None = Field(
        default=None,
        description="Optional JSON object mapping internal paths to aliases",
    )

    # --- Languages ---
    default_language: str = Field(default="en", description="Site default language code")
    active_languages: list[str] = Field(
        default_factory=lambda: ["en"],
        description="Active language codes, in display order",
    )
    default_body_format: str = Field(default="basic_html", description="Rich-text format for empty bodies")

    # --- Files ---
    files_dir: str = Field(default="data/files", description="Local directory for uploaded images")
    files_base_url: str = Field(
        default="http://localhost/files",
        description="Absolute base URL under which files_dir is served",
    )
    upload_extensions: list[str] = Field(
        default_factory=lambda: ["png", "gif", "jpg", "jpeg"],
        description="Allowed image upload extensions",
    )
    max_upload_bytes: int = Field(default=25_600_000, ge=1, description="Maximum image upload size")

    # --- Token data ---
    site_name: str = Field(default="", description="Value for [site:name]")
    site_slogan: str = Field(default="", description="Value for [site:slogan]")
    site_url: str = Field(default="", description="Value for [site:url]")

    # --- Auth (optional: require key for production) ---
    require_studio_key: bool = Field(
        default=False,
        validation_alias=AliasChoices("SECTION_BANNER_REQUIRE_STUDIO_KEY", "REQUIRE_STUDIO_KEY"),
        description="If True, Studio requires MCP_STUDIO_KEY env",
    )
    require_engine_key: bool = Field(
        default=False,
        validation_alias=AliasChoices("SECTION_BANNER_REQUIRE_ENGINE_KEY", "REQUIRE_ENGINE_KEY"),
        description="If True, Engine requires MCP_ENGINE_KEY env",
    )

    # --- Limits ---
    max_banners: int = Field(default=200, ge=1, le=10_000, description="Maximum banners per import")
    render_cache_enabled: bool = Field(default=True, description="Cache render results by cache contexts")

    @field_validator("active_languages")
    @classmethod
    def _non_empty_languages(cls, v: list[str]) -> list[str]:
        cleaned = [code.strip().lower() for code in v if code and code.strip()]
        if not cleaned:
            raise ValueError("active_languages must contain at least one language code")
        return cleaned

    @field_validator("default_language")
    @classmethod
    def _lower_language(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("upload_extensions")
    @classmethod
    def _lower_extensions(cls, v: list[str]) -> list[str]:
        return [ext.strip().lower().lstrip(".") for ext in v if ext and ext.strip()]

    @model_validator(mode="after")
    def _default_is_active(self) -> RuntimeSettings:
        if self.default_language not in self.active_languages:
            raise ValueError(
                f"default_language {self.default_language!r} is not one of {self.active_languages}"
            )
        return self


@lru_cache(maxsize=1)
def get_settings() -> RuntimeSettings:
    """Return the singleton RuntimeSettings (cached after first call)."""
    return RuntimeSettings()
