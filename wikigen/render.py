from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .errors import RenderError
from .templates import TemplateSet

CONTENT_OVERLAY = "{% block content %}{{ content }}{% endblock %}"
TITLE_OVERLAY = "{% block title %}{{ title }}{% endblock %}"


@dataclass
class RenderPayload:
    # Shown in the layout's title block when non-empty.
    title: str
    # Markup is emitted as-is; anything else is escaped.
    content: Any
    # Output path of the page, relative to the output directory.
    path: str


def render_page(templates: TemplateSet, layout: str, payload: RenderPayload) -> bytes:
    """Render ``payload`` through the named layout.

    The page is rendered from a small child template that extends the
    layout and fills its ``content`` block, plus its ``title`` block when
    the payload has a title. Nothing is written here, so a failed render
    leaves no output behind.
    """
    base = templates.get(layout)
    if base is None:
        raise RenderError(f"layout {layout!r} not found")

    overlay = "{% extends layout %}" + CONTENT_OVERLAY
    if payload.title:
        overlay += TITLE_OVERLAY

    try:
        page = templates.env.from_string(overlay)
        text = page.render(
            layout=base,
            title=payload.title,
            content=payload.content,
            path=payload.path,
        )
    except Exception as exc:
        raise RenderError(f"error rendering layout {layout!r}: {exc}") from exc
    return text.encode("utf-8")


def write_bytes(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)


def copy_file(src: Path, dst: Path) -> None:
    """Copy contents, mode and access/modification times of ``src``."""
    dst.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(src, dst)
