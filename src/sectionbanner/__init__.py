"""Section banner application package."""

from .domain import (
    Banner,
    BannerSelector,
    BannerTranslation,
    BodyText,
    PatternKind,
    PatternMatcher,
    RequestContext,
)
from .models import BannerRender, RawRequest

__version__ = "0.1.0"
__all__ = [
    "Banner",
    "BannerRender",
    "BannerSelector",
    "BannerTranslation",
    "BodyText",
    "PatternKind",
    "PatternMatcher",
    "RawRequest",
    "RequestContext",
]
