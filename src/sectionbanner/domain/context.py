"""Render-context builder: raw request -> immutable RequestContext."""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict, Field

from ..models.requests import RawRequest
from ..ports.aliases import AliasLookupPort

CONTENT_ITEM_ROUTE = "entity.node.canonical"
CONTENT_ITEM_ENTITY_TYPE = "node"
LISTING_ROUTE_PREFIX = "view."

_LOGGER = logging.getLogger("sectionbanner.context")


def normalize_path(path: str) -> str:
    """Ensure a leading slash."""
    return path if path.startswith("/") else "/" + path


class RequestContext(BaseModel):
    """Everything the pattern matcher may look at for one request."""

    model_config = ConfigDict(frozen=True)

    current_path: str = Field(default="/", description="Internal path, always starts with '/'")
    alias_path: str | None = Field(default=None, description="Human-readable alias, absent if none")
    route_id: str | None = Field(default=None, description="Dotted route identifier")
    current_bundle: str | None = Field(
        default=None,
        description="Content type; only set on the canonical content-item route",
    )
    current_view_route_id: str | None = Field(
        default=None,
        description="Route id; only set when the route belongs to a listing",
    )

    @property
    def is_content_item(self) -> bool:
        return self.route_id == CONTENT_ITEM_ROUTE and self.current_bundle is not None

    @property
    def listing_name(self) -> str | None:
        """Listing machine name: second dotted segment of the listing route."""
        if not self.current_view_route_id:
            return None
        parts = self.current_view_route_id.split(".")
        if len(parts) >= 2 and parts[0] == "view":
            return parts[1]
        return None


class ContextBuilder:
    """Build RequestContext objects. Never raises."""

    def __init__(self, alias_lookup: AliasLookupPort | None = None, logger: logging.Logger | None = None) -> None:
        self._aliases = alias_lookup
        self._logger = logger or _LOGGER

    def build(self, raw: RawRequest) -> RequestContext:
        current_path = normalize_path(raw.path or "/")
        route_id = raw.route_name or None

        current_bundle = None
        if route_id == CONTENT_ITEM_ROUTE and raw.node is not None:
            if raw.node.entity_type == CONTENT_ITEM_ENTITY_TYPE:
                current_bundle = raw.node.bundle or None

        view_route_id = route_id if route_id and route_id.startswith(LISTING_ROUTE_PREFIX) else None

        return RequestContext(
            current_path=current_path,
            alias_path=self._alias_for(current_path, raw.alias),
            route_id=route_id,
            current_bundle=current_bundle,
            current_view_route_id=view_route_id,
        )

    def _alias_for(self, current_path: str, provided: str | None) -> str | None:
        alias = provided
        if alias is None and self._aliases is not None:
            try:
                alias = self._aliases.alias_for_path(current_path)
            except Exception as e:
                self._logger.warning(
                    "alias_lookup_failed",
                    extra={"path": current_path, "error": str(e)},
                )
                alias = None
        if not alias or alias == current_path:
            return None
        return alias
