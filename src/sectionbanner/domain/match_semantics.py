"""Match semantics for banner targeting."""

# Rule names for reference in tests and audit
RULE_ROUTE_EXACT = "route: pattern containing '.' equal to the route id (checked first)"
RULE_BUNDLE_EXACT = "bundle: 'bundle:<name>' / 'node.type.<name>' equal to the routed content type"
RULE_ALL_CONTENT = "all_content: '/node/*' matches any canonical content-item route"
RULE_LISTING_BY_ID = "listing_by_id: 'view.<name>' matches routes starting with 'view.<name>.'"
RULE_LISTING_BY_NAME = "listing_by_name: bare '<name>' equal to the listing name on a listing route"
RULE_LISTING_BY_PATH = "listing_by_path: '/<path>' equal to path or alias on a listing route (no wildcard)"
RULE_PATH_FALLBACK = "path: exact path, exact alias, then '*' wildcard; always tried when no earlier rule matched"
RULE_EXCLUSIONS_FIRST = "exclusions: 'except:<bundle>' removes the whole banner, before any inclusion pattern"
RULE_FIRST_BANNER_WINS = "order: first banner in list order wins, first matching pattern in stored order"
RULE_TRANSLATION_FALLBACK = "translation: current language, default language, first stored, empty"

# Evaluation order, as reported by capabilities
ALL_RULES = (
    RULE_EXCLUSIONS_FIRST,
    RULE_ROUTE_EXACT,
    RULE_BUNDLE_EXACT,
    RULE_ALL_CONTENT,
    RULE_LISTING_BY_ID,
    RULE_LISTING_BY_NAME,
    RULE_LISTING_BY_PATH,
    RULE_PATH_FALLBACK,
    RULE_FIRST_BANNER_WINS,
    RULE_TRANSLATION_FALLBACK,
)
