"""Port interfaces (Protocols).

Domain and services depend only on these, never on concrete adapters.
"""

from .aliases import AliasLookupPort
from .files import FileLookupPort
from .id_gen import RequestIdProvider, UuidRequestIdProvider
from .rich_text import RichTextRendererPort
from .storage import BannerRowStoragePort, BannerStoragePort, CacheInvalidatorPort
from .tokens import TokenSubstitutionPort

__all__ = [
    "AliasLookupPort",
    "BannerRowStoragePort",
    "BannerStoragePort",
    "CacheInvalidatorPort",
    "FileLookupPort",
    "RequestIdProvider",
    "RichTextRendererPort",
    "TokenSubstitutionPort",
    "UuidRequestIdProvider",
]
