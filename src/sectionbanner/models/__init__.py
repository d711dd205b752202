"""Request and response models."""

from .requests import BannerEdit, BannerFormSubmission, ContentItem, CurrentUser, RawRequest
from .responses import BANNER_CACHE_CONTEXTS, CACHE_PERMANENT, BannerRender, CacheMetadata

__all__ = [
    # Requests
    "BannerEdit",
    "BannerFormSubmission",
    "ContentItem",
    "CurrentUser",
    "RawRequest",
    # Responses
    "BANNER_CACHE_CONTEXTS",
    "BannerRender",
    "CACHE_PERMANENT",
    "CacheMetadata",
]
