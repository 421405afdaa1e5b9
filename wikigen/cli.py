from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Optional, Sequence

from .config import DEFAULT_TEMPLATE_DIR, BuildConfig, load_config, resolve_template_dir
from .errors import GenerateError, LoadError, format_errors
from .generate import generate
from .templates import load_templates
from .utils import parse_bool

logger = logging.getLogger(__name__)


def build_site(args: argparse.Namespace) -> bool:
    source_dir = Path(args.source_dir)
    output_dir = Path(args.output_dir)
    template_dir = resolve_template_dir(args.template_dir, source_dir)

    if not template_dir.is_dir():
        print(f"Template directory {template_dir} does not exist or is not a directory", file=sys.stderr)
        sys.exit(1)
    logger.info("using templates from %s", template_dir)

    try:
        templates = load_templates(template_dir)
    except LoadError as exc:
        print(f"error loading templates: {exc}", file=sys.stderr)
        sys.exit(1)

    config = BuildConfig(
        source_dir=source_dir,
        output_dir=output_dir,
        template_dir=template_dir,
        static_dir=Path(args.static_dir) if args.static_dir else None,
        with_extensions=args.with_extensions,
        clean_output=args.clean_output,
        service_worker=args.service_worker,
    )
    try:
        errors = generate(config, templates)
    except GenerateError as exc:
        print(f"error generating site: {exc}", file=sys.stderr)
        sys.exit(1)

    if errors:
        print(f"{len(errors)} error(s) while generating site:", file=sys.stderr)
        print(format_errors(errors), file=sys.stderr)
        return False
    return True


def main(argv: Optional[Sequence[str]] = None) -> None:
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument(
        "--config",
        default="wikigen.toml",
        help="Path to build config file (TOML/YAML/JSON).",
    )
    pre_args, _ = pre_parser.parse_known_args(argv)
    config = load_config(Path(pre_args.config))

    def cfg_str(key: str, default: str) -> str:
        value = config.get(key)
        return default if value is None else str(value)

    def cfg_bool(key: str, default: bool) -> bool:
        value = config.get(key)
        return default if value is None else parse_bool(value)

    parser = argparse.ArgumentParser(description="Render a tree of markdown files into an HTML site.")
    parser.add_argument("source_dir", help="Directory containing the markdown sources.")
    parser.add_argument("output_dir", help="Directory the site is written to.")
    parser.add_argument("--config", default=pre_args.config, help="Path to build config file (TOML/YAML/JSON).")
    parser.add_argument(
        "--template-dir",
        default=cfg_str("template_dir", DEFAULT_TEMPLATE_DIR),
        help="Directory containing layouts/ and partials/; empty means 'templates' next to the source directory.",
    )
    parser.add_argument(
        "--static-dir",
        default=cfg_str("static_dir", ""),
        help="Directory of static files copied into the output directory.",
    )
    parser.add_argument(
        "--with-extensions",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("with_extensions", True),
        help="Give generated pages a .html extension.",
    )
    parser.add_argument(
        "--clean-output",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("clean_output", True),
        help="Empty the output directory before generating files.",
    )
    parser.add_argument(
        "--service-worker",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("service_worker", False),
        help="Install the offline page-cache service worker as js/service-worker.js.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log template loading details.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )

    start = time.perf_counter()
    built = build_site(args)
    elapsed = time.perf_counter() - start
    if not built:
        sys.exit(1)
    print(f"Build completed in {elapsed:.2f}s.")
    print(f"Site generated in: {args.output_dir}")


if __name__ == "__main__":
    main()
