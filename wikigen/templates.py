from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from jinja2 import DictLoader, Environment, Template, TemplateError

from .errors import LoadError

LAYOUTS_DIR = "layouts"
PARTIALS_DIR = "partials"

# Available to every layout; a partial file of the same name replaces it.
BUILTIN_PARTIALS = {
    "_service_worker": '<script src="/js/offline.js" defer></script>\n',
}

logger = logging.getLogger(__name__)


def template_name(filename: str) -> str:
    name, _, _ = filename.partition(".")
    return name


def partial_name(filename: str) -> str:
    name = template_name(filename)
    if not name.startswith("_"):
        name = "_" + name
    return name


def read_sources(directory: Path, name_for) -> dict[str, str]:
    try:
        entries = sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError as exc:
        raise LoadError(f"cannot read {directory}: {exc}") from exc

    sources = {}
    for entry in entries:
        if entry.name.startswith(".") or entry.is_dir():
            continue
        try:
            sources[name_for(entry.name)] = entry.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise LoadError(f"cannot read {entry}: {exc}") from exc
    return sources


class TemplateSet:
    """Layouts loaded from a template directory, keyed by layout name.

    Layouts and partials share one Jinja2 environment, so a layout can
    include any partial by its ``_name``.
    """

    def __init__(self, env: Environment, layouts: Mapping[str, Template]):
        self.env = env
        self.layouts = MappingProxyType(dict(layouts))

    def __contains__(self, name: str) -> bool:
        return name in self.layouts

    def __len__(self) -> int:
        return len(self.layouts)

    def get(self, name: str):
        return self.layouts.get(name)

    def names(self) -> list[str]:
        return sorted(self.layouts)


def load_templates(root: Path) -> TemplateSet:
    root = Path(root)
    layout_sources = read_sources(root / LAYOUTS_DIR, template_name)

    partial_sources: dict[str, str] = dict(BUILTIN_PARTIALS)
    partials_dir = root / PARTIALS_DIR
    if partials_dir.is_dir():
        partial_sources.update(read_sources(partials_dir, partial_name))

    # Layouts sit under a "layouts/" prefix so they never shadow a partial.
    sources = {**partial_sources, **{f"{LAYOUTS_DIR}/{name}": text for name, text in layout_sources.items()}}
    env = Environment(
        loader=DictLoader(sources),
        autoescape=True,
        keep_trailing_newline=True,
    )

    for name in partial_sources:
        try:
            env.get_template(name)
        except TemplateError as exc:
            raise LoadError(f"error parsing partial {name}: {exc}") from exc

    layouts = {}
    for name in layout_sources:
        try:
            layouts[name] = env.get_template(f"{LAYOUTS_DIR}/{name}")
        except TemplateError as exc:
            raise LoadError(f"error parsing layout {name}: {exc}") from exc
        logger.debug("loaded layout %s", name)

    logger.debug("loaded %d layouts and %d partials from %s", len(layouts), len(partial_sources), root)
    return TemplateSet(env, layouts)
