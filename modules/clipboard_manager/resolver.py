"""
Turns raw command-line arguments into something the engines can act on.

Copy and add take concrete source paths. Paste, show and remove take
regular expressions that must match a whole filename.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Sequence

from .errors import PatternCompileError

logger = logging.getLogger(__name__)


class IOType(Enum):
    FILE = "file"
    TEXT = "text"
    PIPE = "pipe"


@dataclass(frozen=True)
class Item:
    """A source path exactly as given; the raw text keeps any trailing separator."""
    raw: str

    @property
    def path(self) -> Path:
        return Path(self.raw)

    @property
    def is_dir(self) -> bool:
        return self.path.is_dir()


def compile_patterns(raw: Iterable[str]) -> List[re.Pattern]:
    """
    Compile every filter pattern up front.

    Raises:
        PatternCompileError: on the first invalid pattern; no partial list is returned.
    """
    patterns: List[re.Pattern] = []
    for text in raw:
        try:
            patterns.append(re.compile(text))
        except re.error as e:
            raise PatternCompileError(text, str(e)) from e
    logger.debug("Compiled %d pattern(s)", len(patterns))
    return patterns


def matches_any(name: str, patterns: Sequence[re.Pattern]) -> bool:
    """Whole-string match against any pattern. No patterns means everything matches."""
    if not patterns:
        return True
    return any(p.fullmatch(name) for p in patterns)


def filter_entries(directory: Path, patterns: Sequence[re.Pattern]) -> List[Path]:
    if not directory.is_dir():
        return []
    entries = sorted(directory.iterdir(), key=lambda p: p.name)
    return [e for e in entries if matches_any(e.name, patterns)]


def resolve_items(raw: Iterable[str]) -> List[Item]:
    items: List[Item] = []
    seen = set()
    for text in raw:
        if text in seen:
            continue
        seen.add(text)
        items.append(Item(text))
    return items


def detect_io_type(items: Sequence[str], stdin_is_tty: bool, force_text: bool = False) -> IOType:
    """
    Decide whether the arguments are files, a piece of text, or nothing (read stdin).

    A single argument that does not exist on disk is taken as text.
    """
    if force_text:
        return IOType.TEXT
    if not items:
        return IOType.FILE if stdin_is_tty else IOType.PIPE
    if len(items) == 1 and not _exists(items[0]):
        return IOType.TEXT
    return IOType.FILE


def _exists(text: str) -> bool:
    try:
        return Path(text).exists() or Path(text).is_symlink()
    except (OSError, ValueError):
        return False
