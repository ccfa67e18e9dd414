"""
Paste engine: copies a clipboard's staged entries into a destination directory.

Entries are filtered by whole-filename regex first; filtered-out entries are
never touched and produce no outcome. Collisions with different existing
entries go through the ConflictResolver; skipped entries produce no outcome
either. Everything else yields exactly one success or failure.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import List, Sequence

from .conflicts import ConflictResolver
from .copier import CopyStrategy, transfer, with_fallback
from .resolver import filter_entries
from .results import CopyOutcome, ResultAggregator, Success, kind_of
from .store import Clipboard, remove_path

logger = logging.getLogger(__name__)


def _exists(path: Path) -> bool:
    return path.exists() or path.is_symlink()


def is_equivalent(source: Path, target: Path) -> bool:
    """True when both paths name the same filesystem entry (e.g. an earlier hard link)."""
    try:
        return os.path.samefile(source, target)
    except OSError:
        return False


def paste_entry(
    entry: Path,
    target: Path,
    aggregator: ResultAggregator,
    strategy: CopyStrategy = CopyStrategy.FAST,
) -> CopyOutcome:
    kind = kind_of(entry)
    if _exists(target) and is_equivalent(entry, target):
        logger.debug("%s is already in place", target)
        return aggregator.record_success(kind)

    def attempt(current: CopyStrategy) -> None:
        if _exists(target) and target.is_dir() != entry.is_dir():
            remove_path(target)
        transfer(entry, target, current)

    try:
        with_fallback(attempt, strategy, entry.name)
    except OSError as e:
        logger.debug("Paste of %s failed: %s", entry.name, e)
        return aggregator.record_failure(entry.name, e)
    return aggregator.record_success(kind)


def paste(
    clipboard: Clipboard,
    destination: Path,
    patterns: Sequence[re.Pattern],
    aggregator: ResultAggregator,
    resolver: ConflictResolver,
    *,
    strategy: CopyStrategy = CopyStrategy.FAST,
) -> List[CopyOutcome]:
    """
    Paste every (matching) staged entry into `destination`.

    If the clipboard was filled by a cut, the originals of the entries pasted here
    are removed afterwards, along with their staged copies.

    Returns:
        Outcomes of the entries that were attempted, in name order
    """
    resolver.reset()
    destination = Path(destination)
    outcomes: List[CopyOutcome] = []
    pasted: List[str] = []

    for entry in filter_entries(clipboard.data, patterns):
        target = destination / entry.name
        if _exists(target) and not is_equivalent(entry, target):
            if not resolver.should_replace(entry.name):
                continue
        outcome = paste_entry(entry, target, aggregator, strategy)
        outcomes.append(outcome)
        if isinstance(outcome, Success):
            pasted.append(entry.name)

    clipboard.remove_originals(pasted, protect=[destination / name for name in pasted])
    return outcomes
