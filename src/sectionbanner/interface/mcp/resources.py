"""MCP Resources for the engine surface.

Exposes the target pattern grammar and the token help as discoverable resources.
"""

from __future__ import annotations

import json
from typing import Any

from ...adapters.tokens import TOKEN_EXAMPLES

PATTERNS_URI = "sectionbanner://schema/patterns"
TOKENS_URI = "sectionbanner://help/tokens"

_PATTERN_FORMS = [
    {
        "kind": "route",
        "form": "<route id containing a dot>",
        "matches": "the current route id, exactly",
        "example": "section_banner.settings",
    },
    {
        "kind": "bundle",
        "form": "bundle:<type> | node.type.<type>",
        "matches": "a content item page of that content type",
        "example": "bundle:article",
    },
    {
        "kind": "all_content",
        "form": "/node/* | node/*",
        "matches": "any content item page",
        "example": "/node/*",
    },
    {
        "kind": "listing_by_id",
        "form": "view.<listing name>",
        "matches": "any display of that listing",
        "example": "view.articles",
    },
    {
        "kind": "listing_by_name",
        "form": "<listing name>",
        "matches": "that listing while on a listing route",
        "example": "articles",
    },
    {
        "kind": "path",
        "form": "<path or alias, * as wildcard>",
        "matches": "the internal path or its alias; * spans any characters",
        "example": "/news/*",
    },
    {
        "kind": "exclusion",
        "form": "except:<type> | except:bundle:<type> | except:node.type.<type>",
        "matches": "vetoes the whole banner on content items of that type",
        "example": "except:page",
    },
]


def get_pattern_schema_resource() -> dict[str, Any]:
    """Return the target pattern grammar, in evaluation order."""
    return {
        "uri": PATTERNS_URI,
        "name": "Target Pattern Schema",
        "description": "Pattern forms accepted in a banner's target sections, in evaluation order",
        "mimeType": "application/json",
        "contents": json.dumps(
            {
                "forms": _PATTERN_FORMS,
                "notes": [
                    "Exclusions are checked first and veto the banner.",
                    "Patterns of one banner are tried in stored order; the first match wins.",
                    "Banners are tried in list order; the first matching banner is shown.",
                ],
            },
            indent=2,
        ),
    }


def get_token_help_resource() -> dict[str, Any]:
    """Return the placeholder tokens usable in titles and bodies."""
    return {
        "uri": TOKENS_URI,
        "name": "Token Help",
        "description": "Placeholders replaced in banner titles and bodies at render time",
        "mimeType": "application/json",
        "contents": json.dumps({"tokens": TOKEN_EXAMPLES}, indent=2),
    }
