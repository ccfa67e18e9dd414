"""Exceptions raised by clipboard actions.

Per-item filesystem errors never surface as exceptions; they are recorded
on the ResultAggregator. Everything here aborts the whole action.
"""

from __future__ import annotations


class ClipboardError(Exception):
    """Base class for fatal clipboard errors."""

    exit_code = 1

    def __init__(self, message: str, hint: str | None = None):
        super().__init__(message)
        self.message = message
        self.hint = hint


class PatternCompileError(ClipboardError):
    def __init__(self, pattern: str, reason: str):
        super().__init__(
            f"The pattern '{pattern}' is not a valid regular expression ({reason}).",
            "Try fixing the pattern, or escape special characters.",
        )
        self.pattern = pattern


class EmptyMatchError(ClipboardError):
    def __init__(self):
        super().__init__(
            "Clipboard couldn't match your pattern(s) against anything.",
            "Try using a different pattern instead or check what's stored.",
        )


class ClipboardEmptyError(ClipboardError):
    def __init__(self, name: str):
        super().__init__(
            f"The clipboard '{name}' is empty.",
            "Try choosing a different source instead.",
        )
        self.name = name


class InvalidActionError(ClipboardError):
    pass


class InvalidClipboardName(ClipboardError):
    def __init__(self, name: str):
        super().__init__(
            f"'{name}' is not a valid clipboard name.",
            "Use letters, digits, '.', '-' or '_' only.",
        )
        self.name = name


class ClipboardLockedError(ClipboardError):
    def __init__(self, name: str, pid: int):
        super().__init__(
            f"The clipboard '{name}' is in use by process {pid}.",
            "Wait for that process to finish, or choose a different clipboard.",
        )
        self.name = name
        self.pid = pid


class ConfigError(ClipboardError):
    pass
