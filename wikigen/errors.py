from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class WikigenError(Exception):
    """Base class for errors raised by wikigen."""


class LoadError(WikigenError):
    """The template directory could not be loaded."""


class RenderError(WikigenError):
    """A page could not be rendered through its layout."""


class ParseError(WikigenError):
    """A markdown document could not be parsed."""


class GenerateError(WikigenError):
    """A failure that stops the whole build."""


class ErrorKind(enum.Enum):
    COPY = "copy"
    CONVERT = "convert"
    WALK = "walk"


@dataclass(frozen=True)
class BuildError:
    """A per-file failure recorded during the walk.

    The walk keeps going after one of these, so a single broken page does
    not hide problems in the rest of the tree.
    """

    kind: ErrorKind
    source: Optional[Path]
    dest: Optional[Path]
    cause: BaseException

    def __str__(self) -> str:
        if self.kind is ErrorKind.WALK:
            return f"error walking {self.source}: {self.cause}"
        verb = "copying" if self.kind is ErrorKind.COPY else "converting"
        return f"error {verb} {self.source} to {self.dest}: {self.cause}"


def format_errors(errors: list[BuildError]) -> str:
    return "\n".join(str(error) for error in errors)
