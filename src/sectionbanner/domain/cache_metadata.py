"""Cache metadata for banner output: tags, contexts and max-age."""

from __future__ import annotations

import logging
import re
from typing import Iterable, Sequence

from ..models.responses import BANNER_CACHE_CONTEXTS, CACHE_PERMANENT, CacheMetadata
from ..ports.files import FileLookupPort
from .banner import Banner
from .context import RequestContext
from .selector import Selection

DEFAULT_COLLECTION_TAG = "section_banner:banners"

# Token types whose replacement differs per visitor or over time.
USER_TOKEN_TYPES = frozenset({"current-user"})
TIME_TOKEN_TYPES = frozenset({"date"})
USER_CACHE_CONTEXT = "user"

_TOKEN_TYPE_RE = re.compile(r"\[([^\s\[\]:]+):[^\[\]]+\]")

_LOGGER = logging.getLogger("sectionbanner.cache")

__all__ = [
    "BANNER_CACHE_CONTEXTS",
    "CACHE_PERMANENT",
    "CacheMetadata",
    "CacheMetadataCalculator",
    "DEFAULT_COLLECTION_TAG",
    "apply_token_metadata",
    "merge_tags",
    "token_types",
]


def merge_tags(*groups: Iterable[str]) -> list[str]:
    """Concatenate tag groups, dropping duplicates and keeping first-seen order."""
    seen: dict[str, None] = {}
    for group in groups:
        for tag in group:
            seen.setdefault(tag, None)
    return list(seen)


def token_types(*texts: str) -> set[str]:
    """Token types (``current-user``, ``date`` ...) used in the given texts."""
    return {m.group(1) for text in texts if text for m in _TOKEN_TYPE_RE.finditer(text)}


def apply_token_metadata(metadata: CacheMetadata, *texts: str) -> CacheMetadata:
    """Add the variations token replacement brings into the output.

    User tokens vary the output per visitor (``user`` context); date tokens
    make it uncacheable (max-age 0).
    """
    types = token_types(*texts)
    update: dict = {}
    if types & USER_TOKEN_TYPES and USER_CACHE_CONTEXT not in metadata.contexts:
        update["contexts"] = [*metadata.contexts, USER_CACHE_CONTEXT]
    if types & TIME_TOKEN_TYPES:
        update["max_age"] = 0
    return metadata.model_copy(update=update) if update else metadata


class CacheMetadataCalculator:
    """Derive cache metadata from the selected banner."""

    def __init__(
        self,
        collection_tag: str = DEFAULT_COLLECTION_TAG,
        file_lookup: FileLookupPort | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._collection_tag = collection_tag
        self._files = file_lookup
        self._logger = logger or _LOGGER

    @property
    def collection_tag(self) -> str:
        return self._collection_tag

    def compute(self, selection: Selection | None, ctx: RequestContext) -> CacheMetadata:
        # Variations by ctx are covered by BANNER_CACHE_CONTEXTS.
        tags = [self._collection_tag]
        if selection is not None and selection.banner.image:
            tags = merge_tags(tags, self._image_tags(selection.banner.image))
        return CacheMetadata(tags=tags)

    def block_tags(self, banners: Sequence[Banner]) -> list[str]:
        """Collection tag plus the tags of every configured banner image."""
        tags = [self._collection_tag]
        for banner in banners:
            if banner.image:
                tags = merge_tags(tags, self._image_tags(banner.image))
        return tags

    def _image_tags(self, ref: str) -> list[str]:
        if self._files is None:
            return []
        try:
            return list(self._files.cache_tags(ref))
        except Exception as e:
            self._logger.warning("image_cache_tags_failed", extra={"image": ref, "error": str(e)})
            return []
