"""Adapter: rich-text formats (plain_text, basic_html, full_html)."""

from __future__ import annotations

import html
from html.parser import HTMLParser

BASIC_HTML_TAGS = frozenset({
    "a", "em", "strong", "cite", "blockquote", "code", "ul", "ol", "li",
    "dl", "dt", "dd", "h2", "h3", "h4", "h5", "h6", "p", "br", "span", "img",
})
BASIC_HTML_ATTRIBUTES: dict[str, frozenset[str]] = {
    "a": frozenset({"href", "hreflang", "title"}),
    "blockquote": frozenset({"cite"}),
    "img": frozenset({"src", "alt", "title", "width", "height"}),
    "ol": frozenset({"start", "type"}),
    "ul": frozenset({"type"}),
    "h2": frozenset({"id"}),
    "h3": frozenset({"id"}),
    "h4": frozenset({"id"}),
    "h5": frozenset({"id"}),
    "h6": frozenset({"id"}),
}
_VOID_TAGS = frozenset({"br", "img"})
_DROP_CONTENT_TAGS = frozenset({"script", "style", "iframe", "object"})
_URL_ATTRIBUTES = frozenset({"href", "src", "cite"})
_SAFE_SCHEMES = ("http:", "https:", "mailto:", "tel:", "/", "#", "?")


def _safe_url(value: str) -> bool:
    compact = "".join(value.split()).lower()
    if ":" not in compact.split("/", 1)[0]:
        # Relative URL without a scheme.
        return True
    return compact.startswith(_SAFE_SCHEMES)


class _AllowlistSanitizer(HTMLParser):
    """Re-serialize HTML, keeping only allow-listed tags and attributes."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self._out: list[str] = []
        self._open: list[str] = []
        self._dropping = 0

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag in _DROP_CONTENT_TAGS:
            self._dropping += 1
            return
        if self._dropping or tag not in BASIC_HTML_TAGS:
            return
        self._out.append(self._start(tag, attrs))
        if tag not in _VOID_TAGS:
            self._open.append(tag)

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if self._dropping or tag not in BASIC_HTML_TAGS:
            return
        self._out.append(self._start(tag, attrs))

    def handle_endtag(self, tag: str) -> None:
        if tag in _DROP_CONTENT_TAGS:
            self._dropping = max(0, self._dropping - 1)
            return
        if self._dropping or tag not in self._open:
            return
        while self._open:
            current = self._open.pop()
            self._out.append(f"</{current}>")
            if current == tag:
                break

    def handle_data(self, data: str) -> None:
        if not self._dropping:
            self._out.append(html.escape(data, quote=False))

    def _start(self, tag: str, attrs: list[tuple[str, str | None]]) -> str:
        allowed = BASIC_HTML_ATTRIBUTES.get(tag, frozenset())
        parts = [tag]
        for name, value in attrs:
            if name not in allowed or value is None:
                continue
            if name in _URL_ATTRIBUTES and not _safe_url(value):
                continue
            parts.append(f'{name}="{html.escape(value, quote=True)}"')
        return "<" + " ".join(parts) + ">"

    def result(self) -> str:
        self.close()
        closing = "".join(f"</{tag}>" for tag in reversed(self._open))
        self._open.clear()
        return "".join(self._out) + closing


def render_plain_text(value: str) -> str:
    escaped = html.escape(value, quote=True)
    return escaped.replace("\r\n", "\n").replace("\n", "<br>\n")


def sanitize_basic_html(value: str) -> str:
    parser = _AllowlistSanitizer()
    parser.feed(value)
    return parser.result()


class FormatRenderer:
    """Concrete RichTextRendererPort. Unknown formats render as plain text."""

    def __init__(self) -> None:
        self._formats = {
            "plain_text": render_plain_text,
            "basic_html": sanitize_basic_html,
            "restricted_html": sanitize_basic_html,
            "full_html": lambda value: value,
        }

    @property
    def formats(self) -> list[str]:
        return sorted(self._formats)

    def render(self, value: str, format: str) -> str:
        if not value:
            return ""
        handler = self._formats.get(format, render_plain_text)
        return handler(value)
