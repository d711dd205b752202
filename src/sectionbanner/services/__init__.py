"""Application services."""

from .admin_service import BannerAdminService, BannerValidationError, SaveResult, parse_target_sections
from .banner_service import BannerService

__all__ = [
    "BannerAdminService",
    "BannerService",
    "BannerValidationError",
    "SaveResult",
    "parse_target_sections",
]
