"""Adapter: ``[type:name]`` placeholder substitution.

Unresolved tokens are always cleared, never left in the output.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Callable

TOKEN_RE = re.compile(r"\[([^\s\[\]:]+):([^\[\]]+)\]")

# Help text shown next to banner title/body fields.
TOKEN_EXAMPLES: dict[str, str] = {
    "[node:title]": "Current node title",
    "[node:url]": "Current node URL",
    "[node:author:name]": "Node author name",
    "[current-user:name]": "Current user name",
    "[current-user:mail]": "Current user email",
    "[site:name]": "Site name",
    "[site:slogan]": "Site slogan",
    "[date:custom:Y-m-d]": "Current date (Y-m-d format)",
    "[date:custom:F j, Y]": "Current date (Month Day, Year)",
}

_MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
_DAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def format_php_date(fmt: str, moment: datetime) -> str:
    """Format ``moment`` with the common subset of PHP ``date()`` characters."""
    codes: dict[str, Callable[[datetime], str]] = {
        "Y": lambda d: f"{d.year:04d}",
        "y": lambda d: f"{d.year % 100:02d}",
        "m": lambda d: f"{d.month:02d}",
        "n": lambda d: str(d.month),
        "d": lambda d: f"{d.day:02d}",
        "j": lambda d: str(d.day),
        "F": lambda d: _MONTHS[d.month - 1],
        "M": lambda d: _MONTHS[d.month - 1][:3],
        "l": lambda d: _DAYS[d.weekday()],
        "D": lambda d: _DAYS[d.weekday()][:3],
        "H": lambda d: f"{d.hour:02d}",
        "G": lambda d: str(d.hour),
        "i": lambda d: f"{d.minute:02d}",
        "s": lambda d: f"{d.second:02d}",
        "A": lambda d: "AM" if d.hour < 12 else "PM",
        "a": lambda d: "am" if d.hour < 12 else "pm",
    }
    out: list[str] = []
    escaped = False
    for char in fmt:
        if escaped:
            out.append(char)
            escaped = False
        elif char == "\\":
            escaped = True
        elif char in codes:
            out.append(codes[char](moment))
        else:
            out.append(char)
    return "".join(out)


def _field(obj: Any, name: str) -> Any:
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


class BracketTokenSubstitution:
    """Concrete TokenSubstitutionPort for site, node, user, page and date tokens."""

    def __init__(
        self,
        site_name: str = "",
        site_slogan: str = "",
        site_url: str = "",
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._site = {"name": site_name, "slogan": site_slogan, "url": site_url}
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def replace(self, text: str, data: dict[str, Any]) -> str:
        if not text or "[" not in text:
            return text
        return TOKEN_RE.sub(lambda m: self._value(m.group(1), m.group(2), data), text)

    def _value(self, token_type: str, name: str, data: dict[str, Any]) -> str:
        value: Any = None
        if token_type == "site":
            value = self._site.get(name)
        elif token_type == "date":
            value = self._date(name)
        elif token_type == "node":
            value = self._node(data.get("node"), name)
        elif token_type == "current-user":
            value = _field(data.get("current-user"), name)
        elif token_type == "current-page":
            value = _field(data.get("current-page"), name)
        return "" if value is None else str(value)

    def _date(self, name: str) -> str | None:
        now = self._clock()
        if name.startswith("custom:"):
            return format_php_date(name[len("custom:"):], now)
        formats = {"short": "m/d/Y - H:i", "medium": "D, m/d/Y - H:i", "long": "l, F j, Y - H:i"}
        if name in formats:
            return format_php_date(formats[name], now)
        if name == "timestamp":
            return str(int(now.timestamp()))
        return None

    @staticmethod
    def _node(node: Any, name: str) -> Any:
        if node is None:
            return None
        if name == "author:name":
            return _field(node, "author_name")
        if name == "nid":
            return _field(node, "id")
        if name in ("type", "bundle"):
            return _field(node, "bundle")
        if name in ("title", "url"):
            return _field(node, name)
        return None
