from __future__ import annotations

import re
from typing import Union

import markdown
import yaml

from .errors import ParseError

DEFAULT_LAYOUT = "base"
MARKDOWN_EXTENSIONS = ["fenced_code", "tables"]

LIST_MARKER_RE = re.compile(r"^(?P<indent>[ \t]*)(?:[-+*]|\d+[.)])\s+")
FENCE_RE = re.compile(r"^(?P<indent>[ \t]*)(`{3,}|~{3,})")

TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class FrontMatterLoader(yaml.SafeLoader):
    """SafeLoader that leaves dates and timestamps as plain strings."""


FrontMatterLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def parse_front_matter(text: str) -> tuple[dict, str]:
    """Split a document into its YAML header and markdown body.

    A header starts with a ``---`` line at the very top and ends at the next
    ``---`` line. Documents without a header come back with empty metadata.
    """
    clean_text = text.lstrip("\ufeff")
    lines = clean_text.splitlines()
    if not lines or lines[0].strip() != "---":
        return {}, clean_text

    end = None
    for i in range(1, len(lines)):
        if lines[i].strip() == "---":
            end = i
            break
    if end is None:
        raise ParseError("front matter block is not terminated")

    try:
        meta = yaml.load("\n".join(lines[1:end]), Loader=FrontMatterLoader)
    except yaml.YAMLError as exc:
        raise ParseError(f"invalid front matter: {exc}") from exc
    if meta is None:
        meta = {}
    if not isinstance(meta, dict):
        raise ParseError("front matter must be a mapping")
    body = "\n".join(lines[end + 1 :])
    return {str(key): value for key, value in meta.items()}, body


def normalize_list_spacing(text: str) -> str:
    # Python-Markdown needs a blank line before a list that follows a
    # paragraph; CommonMark does not.
    lines = text.splitlines()
    out: list[str] = []
    in_fence = False
    fence_marker = ""
    for line in lines:
        fence_match = FENCE_RE.match(line)
        if fence_match:
            marker = fence_match.group(2)
            if not in_fence:
                in_fence = True
                fence_marker = marker
            elif marker == fence_marker:
                in_fence = False
                fence_marker = ""
            out.append(line)
            continue
        if in_fence:
            out.append(line)
            continue
        list_match = LIST_MARKER_RE.match(line)
        if list_match and not list_match.group("indent"):
            if out and out[-1].strip() and not LIST_MARKER_RE.match(out[-1]):
                out.append("")
        out.append(line)
    return "\n".join(out)


def convert_markdown(data: Union[bytes, str]) -> tuple[str, dict]:
    if isinstance(data, bytes):
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError(f"document is not valid UTF-8: {exc}") from exc
    else:
        text = data
    meta, body = parse_front_matter(text)
    md = markdown.Markdown(extensions=MARKDOWN_EXTENSIONS)
    return md.convert(normalize_list_spacing(body)), meta


def page_layout(meta: dict) -> str:
    layout = meta.get("layout")
    if isinstance(layout, str) and layout:
        return layout
    return DEFAULT_LAYOUT


def page_title(meta: dict) -> str:
    title = meta.get("title")
    return title if isinstance(title, str) else ""
