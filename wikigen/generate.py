from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterator

from markupsafe import Markup

from .config import BuildConfig
from .content import convert_markdown, page_layout, page_title
from .errors import BuildError, ErrorKind, GenerateError
from .render import RenderPayload, copy_file, render_page, write_bytes
from .sanitize import sanitize
from .templates import TemplateSet
from .utils import clean_output_dir

MARKDOWN_SUFFIX = ".md"
HTML_SUFFIX = ".html"
ASSETS_DIR = Path(__file__).parent / "assets"
SERVICE_WORKER_DEST = Path("js") / "service-worker.js"
OFFLINE_SCRIPT_DEST = Path("js") / "offline.js"
# Bundled asset -> destination under the output directory.
OFFLINE_ASSETS = (
    (ASSETS_DIR / "service-worker.js", SERVICE_WORKER_DEST),
    (ASSETS_DIR / "offline.js", OFFLINE_SCRIPT_DEST),
)

logger = logging.getLogger(__name__)


def walk_files(root: Path, errors: list[BuildError]) -> Iterator[Path]:
    """Yield every non-directory entry below ``root``, depth first.

    Entries of each directory are visited in name order. A directory that
    cannot be listed is recorded as a walk error and skipped.
    """
    try:
        with os.scandir(root) as it:
            entries = sorted(it, key=lambda entry: entry.name)
    except OSError as exc:
        errors.append(BuildError(ErrorKind.WALK, root, None, exc))
        return

    for entry in entries:
        path = root / entry.name
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError as exc:
            errors.append(BuildError(ErrorKind.WALK, path, None, exc))
            continue
        if is_dir:
            yield from walk_files(path, errors)
        else:
            yield path


def is_markdown(path: Path) -> bool:
    # A file named just ".md" has no suffix as far as pathlib is concerned.
    return path.name.endswith(MARKDOWN_SUFFIX)


def output_rel_path(rel_path: Path, with_extensions: bool) -> Path:
    name = rel_path.name[: -len(MARKDOWN_SUFFIX)]
    if with_extensions:
        name += HTML_SUFFIX
    return rel_path.parent / name


def convert_file(src: Path, dst: Path, rel_path: Path, templates: TemplateSet) -> None:
    html_text, meta = convert_markdown(src.read_bytes())
    payload = RenderPayload(
        title=page_title(meta),
        content=Markup(sanitize(html_text)),
        path=rel_path.as_posix(),
    )
    write_bytes(dst, render_page(templates, page_layout(meta), payload))


def generate_pages(config: BuildConfig, templates: TemplateSet) -> list[BuildError]:
    errors: list[BuildError] = []
    source_dir = Path(config.source_dir)
    output_dir = Path(config.output_dir)

    for path in walk_files(source_dir, errors):
        rel_path = path.relative_to(source_dir)
        if not is_markdown(path):
            dst = output_dir / rel_path
            logger.info("copying %s", path)
            try:
                copy_file(path, dst)
            except OSError as exc:
                errors.append(BuildError(ErrorKind.COPY, path, dst, exc))
            continue

        out_rel = output_rel_path(rel_path, config.with_extensions)
        dst = output_dir / out_rel
        logger.info("converting %s -> %s", path, dst)
        try:
            convert_file(path, dst, out_rel, templates)
        except Exception as exc:
            errors.append(BuildError(ErrorKind.CONVERT, path, dst, exc))
    return errors


def copy_static(static_dir: Path, output_dir: Path) -> list[BuildError]:
    errors: list[BuildError] = []
    if not static_dir.is_dir():
        errors.append(BuildError(ErrorKind.WALK, static_dir, None, NotADirectoryError("not a directory")))
        return errors

    for path in walk_files(static_dir, errors):
        dst = output_dir / path.relative_to(static_dir)
        logger.info("copying %s -> %s", path, dst)
        try:
            copy_file(path, dst)
        except OSError as exc:
            errors.append(BuildError(ErrorKind.COPY, path, dst, exc))
    return errors


def install_service_worker(output_dir: Path) -> list[BuildError]:
    """Copy the page-cache worker and the script that registers it."""
    errors: list[BuildError] = []
    for asset, rel_dest in OFFLINE_ASSETS:
        dst = output_dir / rel_dest
        logger.info("copying %s -> %s", asset, dst)
        try:
            copy_file(asset, dst)
        except OSError as exc:
            errors.append(BuildError(ErrorKind.COPY, asset, dst, exc))
    return errors


def generate(config: BuildConfig, templates: TemplateSet) -> list[BuildError]:
    """Build the site described by ``config``.

    Per-file failures are collected and returned so that every broken page
    is reported in one run. Problems that make the build meaningless raise
    ``GenerateError`` instead.
    """
    source_dir = Path(config.source_dir)
    output_dir = Path(config.output_dir)
    if not source_dir.is_dir():
        raise GenerateError(f"source directory {source_dir} does not exist or is not a directory")

    if config.clean_output:
        clean_output_dir(output_dir, source_dir)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise GenerateError(f"error creating output directory {output_dir}: {exc}") from exc

    errors = generate_pages(config, templates)
    if config.static_dir is not None:
        errors.extend(copy_static(Path(config.static_dir), output_dir))
    if config.service_worker:
        errors.extend(install_service_worker(output_dir))
    return errors
