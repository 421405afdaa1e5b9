"""Allowlist HTML sanitizer for converted markdown.

The policy follows the common "user generated content" shape: text
formatting, headings, lists, tables, links and images survive, everything
else is either unwrapped (unknown tags) or dropped with its contents
(scripts and other embedded content).
"""

from __future__ import annotations

import html
import re
from urllib.parse import urlparse

from bs4 import BeautifulSoup, CData, Comment, Declaration, Doctype, ProcessingInstruction

MARKUP_NODES = (CData, Comment, Declaration, Doctype, ProcessingInstruction)

ALLOWED_TAGS = frozenset(
    {
        "a", "abbr", "acronym", "area", "article", "aside", "b", "bdi", "bdo",
        "blockquote", "br", "caption", "cite", "code", "col", "colgroup", "dd",
        "del", "details", "dfn", "div", "dl", "dt", "em", "figcaption", "figure",
        "h1", "h2", "h3", "h4", "h5", "h6", "hgroup", "hr", "i", "img", "ins",
        "kbd", "li", "mark", "ol", "p", "pre", "q", "rp", "rt", "ruby", "s",
        "samp", "section", "small", "span", "strike", "strong", "sub", "summary",
        "sup", "table", "tbody", "td", "tfoot", "th", "thead", "time", "tr", "tt",
        "u", "ul", "var", "wbr",
    }
)

# Removed together with everything inside them.
DROP_CONTENT_TAGS = frozenset(
    {
        "script", "style", "iframe", "object", "embed", "applet", "frame",
        "frameset", "noscript", "template", "svg", "math", "title", "head",
        "textarea", "select", "option", "button", "form", "input",
    }
)

GLOBAL_ATTRS = frozenset({"dir", "id", "lang", "title"})

TAG_ATTRS = {
    "a": frozenset({"href"}),
    "area": frozenset({"href", "alt"}),
    "blockquote": frozenset({"cite"}),
    "q": frozenset({"cite"}),
    "del": frozenset({"cite", "datetime"}),
    "ins": frozenset({"cite", "datetime"}),
    "img": frozenset({"src", "alt", "width", "height", "align"}),
    "ol": frozenset({"start", "reversed", "type"}),
    "li": frozenset({"value"}),
    "table": frozenset({"summary", "align"}),
    "td": frozenset({"align", "colspan", "rowspan", "headers", "valign"}),
    "th": frozenset({"align", "colspan", "rowspan", "headers", "scope", "valign"}),
    "col": frozenset({"align", "span", "valign"}),
    "colgroup": frozenset({"align", "span", "valign"}),
    "tr": frozenset({"align", "valign"}),
    "time": frozenset({"datetime"}),
    "details": frozenset({"open"}),
}

URL_ATTRS = frozenset({"href", "src", "cite"})
URL_SCHEMES = frozenset({"http", "https", "mailto"})

CODE_CLASS_RE = re.compile(r"^language-[a-zA-Z0-9]+$")
TAG_RE = re.compile(r"<[^>]+>")
DROP_CONTENT_RE = re.compile(r"<(script|style)\b.*?</\1\s*>", re.IGNORECASE | re.DOTALL)


def is_safe_url(value: str) -> bool:
    value = value.strip()
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    if not parsed.scheme:
        return True
    return parsed.scheme.lower() in URL_SCHEMES


def clean_attrs(tag) -> None:
    allowed = GLOBAL_ATTRS | TAG_ATTRS.get(tag.name, frozenset())
    for name, value in list(tag.attrs.items()):
        if name == "class" and tag.name == "code":
            classes = value if isinstance(value, list) else str(value).split()
            kept = [item for item in classes if CODE_CLASS_RE.match(item)]
            if kept:
                tag["class"] = kept
            else:
                del tag[name]
            continue
        if name not in allowed:
            del tag[name]
            continue
        if name in URL_ATTRS and not is_safe_url(str(value)):
            del tag[name]
    if tag.name == "a" and tag.has_attr("href"):
        tag["rel"] = "nofollow"


def clean_html(html_text: str) -> str:
    soup = BeautifulSoup(html_text, "html.parser")

    for node in soup.find_all(string=lambda text: isinstance(text, MARKUP_NODES)):
        node.extract()

    for tag in soup.find_all(True):
        if tag.decomposed:
            continue
        if tag.name in DROP_CONTENT_TAGS:
            tag.decompose()
        elif tag.name not in ALLOWED_TAGS:
            tag.unwrap()
        else:
            clean_attrs(tag)

    return str(soup)


def strip_tags(html_text: str) -> str:
    text = DROP_CONTENT_RE.sub("", html_text)
    return html.escape(html.unescape(TAG_RE.sub("", text)), quote=False)


def sanitize(html_text: str) -> str:
    try:
        return clean_html(html_text)
    except RecursionError:
        # Nested too deeply to serialize; fall back to plain text.
        return strip_tags(html_text)
