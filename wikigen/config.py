from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

try:
    import tomllib as toml
except ImportError:
    import tomli as toml

import yaml

DEFAULT_TEMPLATE_DIR = "templates"


@dataclass(frozen=True)
class BuildConfig:
    source_dir: Path
    output_dir: Path
    template_dir: Path
    static_dir: Optional[Path] = None
    with_extensions: bool = True
    clean_output: bool = True
    service_worker: bool = False


def resolve_template_dir(value: str, source_dir: Path) -> Path:
    """An empty value means ``templates`` next to the source directory."""
    if not value:
        return (Path(source_dir).parent / DEFAULT_TEMPLATE_DIR).resolve()
    return Path(value).resolve()


def load_config(path: Path) -> dict:
    if not path.exists():
        return {}
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    if suffix == ".toml":
        try:
            data = toml.loads(text)
        except Exception as exc:  # pragma: no cover - depends on parser
            print(f"Invalid TOML in config file {path}: {exc}", file=sys.stderr)
            sys.exit(1)
        return data
    if suffix in {".yml", ".yaml"}:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            print(f"Invalid YAML in config file {path}: {exc}", file=sys.stderr)
            sys.exit(1)
        if data is None:
            return {}
        if not isinstance(data, dict):
            print(f"YAML config must be a mapping: {path}", file=sys.stderr)
            sys.exit(1)
        return data
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        print(f"Invalid JSON in config file {path}: {exc}", file=sys.stderr)
        sys.exit(1)
    if not isinstance(data, dict):
        print(f"JSON config must be an object: {path}", file=sys.stderr)
        sys.exit(1)
    return data
