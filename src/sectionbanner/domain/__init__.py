"""Domain layer for section banners."""

from .banner import Banner, BannerTranslation, BodyText
from .context import ContextBuilder, RequestContext
from .match_semantics import (
    ALL_RULES,
    RULE_ALL_CONTENT,
    RULE_BUNDLE_EXACT,
    RULE_EXCLUSIONS_FIRST,
    RULE_FIRST_BANNER_WINS,
    RULE_LISTING_BY_ID,
    RULE_LISTING_BY_NAME,
    RULE_LISTING_BY_PATH,
    RULE_PATH_FALLBACK,
    RULE_ROUTE_EXACT,
    RULE_TRANSLATION_FALLBACK,
)
from .patterns import PatternKind, PatternMatcher, exclusion_target, is_exclusion
from .selector import BannerSelector, Selection
from .translation import ResolvedContent, TranslationResolver
from .cache_metadata import CACHE_PERMANENT, CacheMetadata, CacheMetadataCalculator

__all__ = [
    "ALL_RULES",
    "Banner",
    "BannerSelector",
    "BannerTranslation",
    "BodyText",
    "CACHE_PERMANENT",
    "CacheMetadata",
    "CacheMetadataCalculator",
    "ContextBuilder",
    "PatternKind",
    "PatternMatcher",
    "RequestContext",
    "ResolvedContent",
    "Selection",
    "TranslationResolver",
    "exclusion_target",
    "is_exclusion",
    "RULE_ALL_CONTENT",
    "RULE_BUNDLE_EXACT",
    "RULE_EXCLUSIONS_FIRST",
    "RULE_FIRST_BANNER_WINS",
    "RULE_LISTING_BY_ID",
    "RULE_LISTING_BY_NAME",
    "RULE_LISTING_BY_PATH",
    "RULE_PATH_FALLBACK",
    "RULE_ROUTE_EXACT",
    "RULE_TRANSLATION_FALLBACK",
]
