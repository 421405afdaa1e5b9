from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from .errors import GenerateError

# Entries in the output root that survive cleaning.
SKIP_CLEAN_NAMES = frozenset({".gitignore"})

logger = logging.getLogger(__name__)


def parse_bool(value: object) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "y", "on"}
    return False


def clean_output_dir(output_dir: Path, source_dir: Path) -> None:
    """Empty ``output_dir`` without removing the directory itself."""
    output_resolved = output_dir.resolve()
    source_resolved = source_dir.resolve()
    if source_resolved.is_relative_to(output_resolved):
        raise GenerateError(f"refusing to clean {output_dir}: it contains the source directory")
    if not output_dir.exists():
        return

    try:
        entries = sorted(os.listdir(output_dir))
    except OSError as exc:
        raise GenerateError(f"error cleaning output directory: {exc}") from exc

    for entry in entries:
        if entry in SKIP_CLEAN_NAMES:
            continue
        path = output_dir / entry
        logger.info("cleaning: %s", path)
        try:
            if path.is_dir() and not path.is_symlink():
                shutil.rmtree(path)
            else:
                path.unlink()
        except OSError as exc:
            raise GenerateError(f"error cleaning output directory: {exc}") from exc
