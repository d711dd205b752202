"""Concrete adapter implementations."""

from .aliases import MappingAliasLookup
from .local_files import LocalFileStore
from .render_cache import TagAwareMemoryCache
from .rich_text import FormatRenderer
from .state_store import JsonStateStore, MemoryStateStore, StateBannerStorage
from .tokens import BracketTokenSubstitution

__all__ = [
    "BracketTokenSubstitution",
    "FormatRenderer",
    "JsonStateStore",
    "LocalFileStore",
    "MappingAliasLookup",
    "MemoryStateStore",
    "StateBannerStorage",
    "TagAwareMemoryCache",
]
