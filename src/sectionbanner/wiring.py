"""Composition root: single place where all wiring happens.

Call ``build_banner_service()`` or ``build_admin_service()`` to get a
fully-constructed service with real adapters.  No ad-hoc construction
elsewhere.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from .adapters.aliases import MappingAliasLookup
from .adapters.local_files import LocalFileStore
from .adapters.render_cache import TagAwareMemoryCache
from .adapters.rich_text import FormatRenderer
from .adapters.state_store import JsonStateStore, StateBannerStorage
from .adapters.tokens import BracketTokenSubstitution
from .config.runtime import RuntimeSettings, get_settings
from .domain.cache_metadata import CacheMetadataCalculator
from .domain.context import ContextBuilder
from .domain.translation import TranslationResolver
from .services.admin_service import BannerAdminService
from .services.banner_service import BannerService

_LOGGER = logging.getLogger("sectionbanner")


@lru_cache(maxsize=None)
def _render_cache_for(state_path: str) -> TagAwareMemoryCache:
    return TagAwareMemoryCache(state=JsonStateStore(state_path))


def get_render_cache(settings: RuntimeSettings | None = None) -> TagAwareMemoryCache:
    """Process-wide render cache; tag invalidations go through the state file.

    A save from any process sharing the state file (studio, CLI) stales the
    entries cached here.
    """
    settings = settings or get_settings()
    return _render_cache_for(settings.state_path)


def build_storage(settings: RuntimeSettings | None = None) -> StateBannerStorage:
    settings = settings or get_settings()
    return StateBannerStorage(JsonStateStore(settings.state_path), key=settings.state_key)


def build_file_store(settings: RuntimeSettings | None = None) -> LocalFileStore:
    settings = settings or get_settings()
    return LocalFileStore(settings.files_dir, settings.files_base_url)


def build_banner_service(settings: RuntimeSettings | None = None) -> BannerService:
    """Construct a BannerService with real adapters."""
    settings = settings or get_settings()
    files = build_file_store(settings)
    aliases = MappingAliasLookup.from_file(settings.aliases_path) if settings.aliases_path else None
    return BannerService(
        storage=build_storage(settings),
        context_builder=ContextBuilder(alias_lookup=aliases, logger=_LOGGER),
        resolver=TranslationResolver(default_format=settings.default_body_format),
        cache_calculator=CacheMetadataCalculator(
            collection_tag=settings.cache_tag,
            file_lookup=files,
            logger=_LOGGER,
        ),
        token_substitution=BracketTokenSubstitution(
            site_name=settings.site_name,
            site_slogan=settings.site_slogan,
            site_url=settings.site_url,
        ),
        renderer=FormatRenderer(),
        file_lookup=files,
        render_cache=get_render_cache(settings) if settings.render_cache_enabled else None,
        default_language=settings.default_language,
        logger=_LOGGER,
    )


def build_admin_service(settings: RuntimeSettings | None = None) -> BannerAdminService:
    """Construct a BannerAdminService with real adapters."""
    settings = settings or get_settings()
    return BannerAdminService(
        storage=build_storage(settings),
        settings=settings,
        invalidator=get_render_cache(settings),
        file_store=build_file_store(settings),
        logger=_LOGGER,
    )
