#!/usr/bin/env python3
"""
On-disk layout of a named clipboard.

    <root>/<name>/data/                  copied items, or the raw text file
    <root>/<name>/data/rawdata.clipboard text payload
    <root>/<name>/metadata/originals     absolute source paths of a cut, one per line
    <root>/<name>/metadata/notes         free-form note
    <root>/<name>/metadata/lock          pid of the process using the clipboard

Clipboards whose name ends in '_' live under the persistent root.
"""

from __future__ import annotations

import logging
import os
import re
import shutil
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import psutil

from .config import Settings
from .copier import destination_name
from .errors import ClipboardLockedError, InvalidClipboardName

logger = logging.getLogger(__name__)

DATA_DIRECTORY = "data"
METADATA_DIRECTORY = "metadata"
RAW_FILE_NAME = "rawdata.clipboard"
ORIGINALS_FILE_NAME = "originals"
NOTES_FILE_NAME = "notes"
LOCK_FILE_NAME = "lock"

_NAME_RE = re.compile(r"[A-Za-z0-9_.\-]+")


def validate_name(name: str) -> str:
    if not name or name in (".", "..") or not _NAME_RE.fullmatch(name):
        raise InvalidClipboardName(name)
    return name


def is_persistent_name(name: str) -> bool:
    return name.endswith("_")


def remove_path(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


class Clipboard:
    def __init__(self, name: str, settings: Settings):
        self.name = validate_name(name)
        self.settings = settings
        self.is_persistent = settings.always_persist or is_persistent_name(name)
        base = settings.persistent_dir if self.is_persistent else settings.temporary_dir
        self.root = Path(base) / self.name
        self.data = self.root / DATA_DIRECTORY
        self.raw = self.data / RAW_FILE_NAME
        self.metadata = self.root / METADATA_DIRECTORY
        self.originals_file = self.metadata / ORIGINALS_FILE_NAME
        self.notes_file = self.metadata / NOTES_FILE_NAME
        self.lock_file = self.metadata / LOCK_FILE_NAME

    def __repr__(self) -> str:
        return f"Clipboard({self.name!r}, root={str(self.root)!r})"

    def ensure(self) -> "Clipboard":
        self.data.mkdir(parents=True, exist_ok=True)
        self.metadata.mkdir(parents=True, exist_ok=True)
        return self

    # --- contents ---

    def entries(self) -> List[Path]:
        if not self.data.is_dir():
            return []
        return sorted(self.data.iterdir(), key=lambda p: p.name)

    def is_empty(self) -> bool:
        return not self.data.is_dir() or not any(self.data.iterdir())

    def holds_text(self) -> bool:
        return self.raw.is_file()

    def counts(self) -> Tuple[int, int]:
        """(files, directories) directly under the data directory."""
        files = directories = 0
        for entry in self.entries():
            if entry.is_dir():
                directories += 1
            else:
                files += 1
        return files, directories

    def last_write_time(self) -> Optional[datetime]:
        if not self.data.exists():
            return None
        return datetime.fromtimestamp(self.data.stat().st_mtime)

    def clear(self) -> None:
        """Empty the data directory and forget any pending cut."""
        for entry in self.entries():
            remove_path(entry)
        if self.originals_file.exists():
            self.originals_file.unlink()
        self.ensure()

    def write_text(self, content: str | bytes, append: bool = False) -> int:
        self.ensure()
        payload = content.encode("utf-8") if isinstance(content, str) else content
        with open(self.raw, "ab" if append else "wb") as f:
            f.write(payload)
        return len(payload)

    def read_bytes(self) -> bytes:
        return self.raw.read_bytes()

    def read_text(self) -> str:
        return self.raw.read_text(encoding="utf-8", errors="replace")

    # --- originals log (cut semantics) ---

    def append_original(self, path: Path) -> None:
        self.metadata.mkdir(parents=True, exist_ok=True)
        with open(self.originals_file, "a", encoding="utf-8") as f:
            f.write(f"{os.path.abspath(path)}\n")

    def reset_originals(self) -> None:
        if self.originals_file.exists():
            self.originals_file.unlink()

    def originals(self) -> List[Path]:
        if not self.originals_file.is_file():
            return []
        lines = self.originals_file.read_text(encoding="utf-8").splitlines()
        return [Path(line) for line in lines if line.strip()]

    def remove_originals(
        self,
        consumed: Optional[Iterable[str]] = None,
        protect: Iterable[Path] = (),
    ) -> List[Path]:
        """
        Delete the sources of a cut once they have been pasted.

        `consumed` limits removal to originals whose staged name was pasted, along with
        the staged entries themselves. Paths in `protect` (where entries were just pasted)
        are never deleted. The log keeps whatever was not consumed.
        Returns the originals that were removed.
        """
        originals = self.originals()
        if not originals:
            return []
        names = None if consumed is None else set(consumed)
        protected = {os.path.abspath(p) for p in protect}
        removed: List[Path] = []
        remaining: List[Path] = []
        for original in originals:
            staged_name = destination_name(original)
            if names is not None and staged_name not in names:
                remaining.append(original)
                continue
            try:
                if os.path.abspath(original) in protected:
                    logger.debug("Keeping %s, it was pasted in place", original)
                elif original.exists() or original.is_symlink():
                    remove_path(original)
                removed.append(original)
            except OSError as e:
                logger.warning("Could not remove original %s: %s", original, e)
                remaining.append(original)
                continue
            staged = self.data / staged_name
            if staged.exists() or staged.is_symlink():
                remove_path(staged)
        if remaining:
            self.originals_file.write_text("".join(f"{p}\n" for p in remaining), encoding="utf-8")
        else:
            self.originals_file.unlink()
        logger.debug("Removed %d original(s) of %s", len(removed), self.name)
        return removed

    # --- note ---

    def read_note(self) -> Optional[str]:
        if not self.notes_file.is_file():
            return None
        return self.notes_file.read_text(encoding="utf-8")

    def write_note(self, text: str) -> None:
        self.metadata.mkdir(parents=True, exist_ok=True)
        self.notes_file.write_text(text, encoding="utf-8")

    def remove_note(self) -> bool:
        if self.notes_file.exists():
            self.notes_file.unlink()
            return True
        return False

    # --- lock ---

    def lock_owner(self) -> Optional[int]:
        if not self.lock_file.is_file():
            return None
        try:
            return int(self.lock_file.read_text(encoding="utf-8").strip())
        except ValueError:
            return None

    def lock(self) -> "ClipboardLock":
        return ClipboardLock(self)


class ClipboardLock:
    """
    Advisory lock: the lock file holds the pid of the owning process.

    A lock left behind by a process that no longer exists is taken over.
    """

    def __init__(self, clipboard: Clipboard):
        self.clipboard = clipboard
        self.pid = os.getpid()
        self._held = False

    def acquire(self) -> None:
        self.clipboard.ensure()
        path = self.clipboard.lock_file
        while True:
            try:
                fd = os.open(path, os.O_CREAT | os.O_EXCL | os.O_WRONLY)
            except FileExistsError:
                owner = self.clipboard.lock_owner()
                if owner is not None and owner != self.pid and psutil.pid_exists(owner):
                    raise ClipboardLockedError(self.clipboard.name, owner)
                logger.debug("Taking over stale lock on %s (pid %s)", self.clipboard.name, owner)
                try:
                    path.unlink()
                except FileNotFoundError:
                    pass
                continue
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(str(self.pid))
            self._held = True
            return

    def release(self) -> None:
        if not self._held:
            return
        if self.clipboard.lock_owner() == self.pid:
            self.clipboard.lock_file.unlink()
        self._held = False

    def __enter__(self) -> "ClipboardLock":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()


@dataclass(frozen=True)
class ClipboardSummary:
    name: str
    persistent: bool
    data: Path


def list_clipboards(settings: Settings) -> List[ClipboardSummary]:
    """All clipboards that currently hold something, sorted by name."""
    found: List[ClipboardSummary] = []
    for root, persistent in ((settings.temporary_dir, False), (settings.persistent_dir, True)):
        root = Path(root)
        if not root.is_dir():
            continue
        for child in root.iterdir():
            data = child / DATA_DIRECTORY
            if data.is_dir() and any(data.iterdir()):
                found.append(ClipboardSummary(child.name, persistent, data))
    return sorted(found, key=lambda c: (c.name, c.persistent))
