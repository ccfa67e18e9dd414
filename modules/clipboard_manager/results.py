"""
Per-batch outcome bookkeeping.

A ResultAggregator is created by the caller for one action and passed to the
copy and paste engines, which record exactly one outcome per attempted item.
The caller reads the totals once the batch is done and decides the exit code.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Union


class ItemKind(Enum):
    FILE = "file"
    DIRECTORY = "directory"
    BYTES = "bytes"


@dataclass(frozen=True)
class Success:
    """An item (or a run of bytes) that made it to its destination."""
    kind: ItemKind
    amount: int = 1


@dataclass(frozen=True)
class Failure:
    """An item that could not be processed, with the OS error code."""
    label: str
    error_code: int
    message: str = ""

    def describe(self) -> str:
        if self.message:
            return f"{self.message} (errno {self.error_code})"
        return f"errno {self.error_code}"


CopyOutcome = Union[Success, Failure]


def kind_of(path: Path) -> ItemKind:
    return ItemKind.DIRECTORY if path.is_dir() else ItemKind.FILE


@dataclass
class ResultAggregator:
    """Totals for one batch: three independent counters plus failures."""
    files: int = 0
    directories: int = 0
    bytes: int = 0
    failures: List[Failure] = field(default_factory=list)
    outcomes: List[CopyOutcome] = field(default_factory=list)

    def record_success(self, kind: ItemKind, amount: int = 1) -> Success:
        if amount < 0:
            raise ValueError(f"Success amount cannot be negative: {amount}")
        if kind is ItemKind.FILE:
            self.files += amount
        elif kind is ItemKind.DIRECTORY:
            self.directories += amount
        else:
            self.bytes += amount
        outcome = Success(kind, amount)
        self.outcomes.append(outcome)
        return outcome

    def record_failure(self, label: str, error: OSError | int) -> Failure:
        if isinstance(error, OSError):
            outcome = Failure(str(label), error.errno or 0, error.strerror or str(error))
        else:
            outcome = Failure(str(label), int(error))
        self.failures.append(outcome)
        self.outcomes.append(outcome)
        return outcome

    def record(self, outcome: CopyOutcome) -> CopyOutcome:
        if isinstance(outcome, Success):
            return self.record_success(outcome.kind, outcome.amount)
        self.failures.append(outcome)
        self.outcomes.append(outcome)
        return outcome

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def total_items(self) -> int:
        return self.files + self.directories

    @property
    def is_empty(self) -> bool:
        return not self.outcomes
