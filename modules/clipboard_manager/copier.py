"""
Copy engine: copies one filesystem item into a destination directory.

Strategy
1. FAST: hard-link files into place (directories are always copied in full).
2. SAFE: full byte copy with metadata (shutil.copy2 / copytree).
3. A FAST attempt that fails with EXDEV (source and destination on different
   devices) is retried once with SAFE. Any other OSError is recorded as a
   failure straight away.

Nothing here raises for a per-item error; the aggregator gets exactly one
outcome for every item attempted.
"""

from __future__ import annotations

import errno
import logging
import os
import shutil
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from .resolver import Item
from .results import CopyOutcome, ItemKind, ResultAggregator

logger = logging.getLogger(__name__)


class CopyStrategy(Enum):
    FAST = "fast"
    SAFE = "safe"

    @classmethod
    def from_safe_flag(cls, use_safe_copy: bool) -> "CopyStrategy":
        return cls.SAFE if use_safe_copy else cls.FAST


def destination_name(source: str | os.PathLike) -> str:
    """
    Name an item gets inside the destination directory.

    Examples:
        'photos/summer.jpg' => 'summer.jpg'
        'photos/'           => 'photos' (no final component, use the parent's name)
        '/'                 => 'root'
    """
    text = os.fspath(source)
    name = os.path.basename(text)
    if not name:
        name = os.path.basename(os.path.dirname(text))
    if not name or name in (".", ".."):
        name = Path(text).resolve().name
    return name or "root"


def is_cross_device(error: OSError) -> bool:
    return error.errno == errno.EXDEV


def with_fallback(operation: Callable[[CopyStrategy], None], strategy: CopyStrategy, label: str) -> None:
    """
    Run `operation` with `strategy`; a cross-device FAST failure gets exactly one SAFE retry.

    Raises:
        OSError: the first error, or the retry's error after a cross-device fallback.
    """
    try:
        operation(strategy)
    except OSError as e:
        if strategy is not CopyStrategy.FAST or not is_cross_device(e):
            raise
        logger.debug("Cross-device link for %s, retrying with a full copy", label)
        operation(CopyStrategy.SAFE)


def transfer(source: Path, target: Path, strategy: CopyStrategy) -> None:
    """
    Copy one entry to an exact target path, replacing what is there.

    Raises:
        OSError: whatever the filesystem reports; EXDEV is left to the caller.
    """
    if source.is_dir() and not source.is_symlink():
        target.mkdir(parents=True, exist_ok=True)
        shutil.copytree(source, target, symlinks=True, dirs_exist_ok=True)
        return

    if target.is_symlink() or target.exists():
        if target.exists() and not source.is_symlink() and os.path.samefile(source, target):
            return
        # unlink, never truncate: the old target may share an inode with another file
        target.unlink()

    # symlinks are recreated, not hard-linked
    if strategy is CopyStrategy.FAST and not source.is_symlink():
        os.link(source, target)
    else:
        shutil.copy2(source, target, follow_symlinks=False)


def copy_item(
    source: Item | str | os.PathLike,
    dest_dir: Path,
    aggregator: ResultAggregator,
    *,
    strategy: CopyStrategy = CopyStrategy.FAST,
    record_original: Optional[Callable[[Path], None]] = None,
) -> CopyOutcome:
    """
    Copy a file or directory into `dest_dir` and record the outcome.

    Args:
        source: Item to copy; a trailing separator is honoured when naming directories
        dest_dir: Staging (or any) directory receiving the item
        aggregator: Receives one success or failure
        strategy: FAST (hard link) or SAFE (full copy)
        record_original: Called with the source path after a successful copy (cut)

    Returns:
        The outcome recorded on the aggregator
    """
    raw = source.raw if isinstance(source, Item) else os.fspath(source)
    source_path = Path(raw)
    kind = ItemKind.DIRECTORY if source_path.is_dir() and not source_path.is_symlink() else ItemKind.FILE
    target = Path(dest_dir) / destination_name(raw)

    def attempt(current: CopyStrategy) -> None:
        transfer(source_path, target, current)
        if record_original is not None:
            record_original(source_path)

    try:
        with_fallback(attempt, strategy, raw)
    except OSError as e:
        logger.debug("Copy of %s failed: %s", raw, e)
        return aggregator.record_failure(raw, e)

    logger.debug("Copied %s -> %s (%s)", raw, target, kind.value)
    return aggregator.record_success(kind)


def copy_batch(
    items: Iterable[Item | str | os.PathLike],
    dest_dir: Path,
    aggregator: ResultAggregator,
    *,
    strategy: CopyStrategy = CopyStrategy.FAST,
    record_original: Optional[Callable[[Path], None]] = None,
) -> List[CopyOutcome]:
    return [
        copy_item(item, dest_dir, aggregator, strategy=strategy, record_original=record_original)
        for item in items
    ]
