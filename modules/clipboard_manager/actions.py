"""
Action handlers: one function per clipboard action.

Every handler takes an ActionContext and reports progress on its consoles.
Per-item problems end up on ctx.aggregator; anything that should stop the
whole action is raised as a ClipboardError.
"""

from __future__ import annotations

import logging
import shutil
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, List, Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.text import Text

from . import ui
from .config import Settings
from .conflicts import ConflictResolver
from .copier import CopyStrategy, copy_batch
from .errors import ClipboardEmptyError, EmptyMatchError, InvalidActionError
from .paster import paste as paste_entries
from .resolver import compile_patterns, filter_entries, matches_any, resolve_items
from .results import ItemKind, ResultAggregator, kind_of
from .store import RAW_FILE_NAME, Clipboard, list_clipboards, remove_path

logger = logging.getLogger(__name__)


@dataclass
class ActionContext:
    clipboard: Clipboard
    settings: Settings
    resolver: ConflictResolver
    strategy: CopyStrategy = CopyStrategy.FAST
    aggregator: ResultAggregator = field(default_factory=ResultAggregator)
    console: Console = field(default_factory=lambda: ui.console)
    err_console: Console = field(default_factory=lambda: ui.err_console)
    stdin: Optional[BinaryIO] = None
    stdout: Optional[BinaryIO] = None
    cwd: Path = field(default_factory=Path.cwd)

    def read_stdin(self) -> bytes:
        stream = self.stdin if self.stdin is not None else sys.stdin.buffer
        return stream.read()

    def write_stdout(self, data: bytes) -> None:
        stream = self.stdout if self.stdout is not None else sys.stdout.buffer
        stream.write(data)
        stream.flush()


def _no_contents(ctx: ActionContext) -> None:
    ui.log_info(
        f"The clipboard [help]{ctx.clipboard.name}[/help] is empty. "
        "Try copying or cutting something into it first.",
        ctx.err_console,
    )


# --- copy / cut ---


def copy(ctx: ActionContext, items: Sequence[str], cut: bool = False) -> None:
    """Replace the clipboard's contents with copies of `items`."""
    ctx.clipboard.clear()
    record = ctx.clipboard.append_original if cut else None
    copy_batch(
        resolve_items(items),
        ctx.clipboard.data,
        ctx.aggregator,
        strategy=ctx.strategy,
        record_original=record,
    )


def copy_text(ctx: ActionContext, text: str, cut: bool = False) -> None:
    ctx.clipboard.clear()
    written = ctx.clipboard.write_text(text)
    ctx.aggregator.record_success(ItemKind.BYTES, written)
    if cut:
        ctx.clipboard.append_original(ctx.clipboard.raw)
    verb = "Cut" if cut else "Copied"
    ui.log_success(f'{verb} text "[bold]{escape(text)}[/bold]"', ctx.err_console)


def pipe_in(ctx: ActionContext, cut: bool = False) -> None:
    content = ctx.read_stdin()
    ctx.clipboard.clear()
    written = ctx.clipboard.write_text(content)
    ctx.aggregator.record_success(ItemKind.BYTES, written)
    if cut:
        ctx.clipboard.append_original(ctx.clipboard.raw)


# --- paste ---


def paste(ctx: ActionContext, patterns: Sequence[str] = ()) -> None:
    compiled = compile_patterns(patterns)
    if ctx.clipboard.is_empty():
        _no_contents(ctx)
        return
    paste_entries(
        ctx.clipboard,
        ctx.cwd,
        compiled,
        ctx.aggregator,
        ctx.resolver,
        strategy=ctx.strategy,
    )


def pipe_out(ctx: ActionContext) -> None:
    """Write every stored file's bytes to stdout, in name order."""
    if not ctx.clipboard.data.is_dir():
        return
    for entry in sorted(p for p in ctx.clipboard.data.rglob("*") if p.is_file()):
        content = entry.read_bytes()
        ctx.write_stdout(content)
        ctx.aggregator.record_success(ItemKind.BYTES, len(content))
    ctx.clipboard.remove_originals()


# --- inspect ---


def clear(ctx: ActionContext) -> None:
    if ctx.clipboard.is_empty():
        _no_contents(ctx)
        return
    ctx.clipboard.clear()
    ui.log_success(f"Cleared clipboard [help]{ctx.clipboard.name}[/help]", ctx.err_console)


def show(ctx: ActionContext, patterns: Sequence[str] = ()) -> None:
    compiled = compile_patterns(patterns)
    clipboard = ctx.clipboard
    if clipboard.is_empty():
        _no_contents(ctx)
        return

    limit = ctx.settings.show_preview_chars
    if clipboard.holds_text():
        content = clipboard.read_text().replace("\n", "")
        shown = min(limit, len(content))
        ctx.err_console.print(
            f"[info]• Here are the first [bold]{shown}[/bold] characters of clipboard "
            f"[help]{clipboard.name}[/help]:[/info]"
        )
        ctx.console.print(f"[bold][info]{escape(content[:limit])}[/info][/bold]")
        if len(content) > limit:
            ctx.err_console.print(f"[help]...and {len(content) - limit} more[/help]")
        return

    ctx.err_console.print(f"[info]• Here are the items in clipboard [help]{clipboard.name}[/help]:[/info]")
    for entry in filter_entries(clipboard.data, compiled):
        ctx.console.print(f"[info]▏[/info] [bold][help]{escape(entry.name)}[/help][/bold]")


def status(ctx: ActionContext) -> None:
    clipboards = list_clipboards(ctx.settings)
    if not clipboards:
        ui.log_info("There are no clipboards with contents. Try copying or cutting something first.", ctx.err_console)
        return

    ctx.err_console.print("[info]• Here is the status of all clipboards:[/info]")
    width = ctx.console.width
    for summary in clipboards:
        marker = " (p)" if summary.persistent else ""
        remaining = width - (len(summary.name) + 4 + len(marker))
        line = Text(f"▏ {summary.name}{marker}: ", style="info")

        raw = summary.data / RAW_FILE_NAME
        if raw.is_file():
            content = raw.read_text(encoding="utf-8", errors="replace").replace("\n", "")
            line.append(content[: max(remaining, 0)], style="help")
            ctx.console.print(line)
            continue

        first = True
        for entry in sorted(summary.data.iterdir(), key=lambda p: p.name):
            if remaining <= 0:
                break
            name = entry.name
            if not first and len(name) <= remaining - 2:
                line.append(", ", style="help")
                remaining -= 2
            if len(name) <= remaining:
                line.append(name, style="help")
                remaining -= len(name)
                first = False
        ctx.console.print(line)


def info(ctx: ActionContext) -> None:
    clipboard = ctx.clipboard
    out = ctx.err_console

    def row(label: str, value) -> None:
        out.print(f"[info]• {label} [help]{escape(str(value))}[/help][/info]")

    row("This clipboard's name is", clipboard.name)
    row("Stored in", clipboard.root)
    row("Persistent?", "Yes" if clipboard.is_persistent else "No")
    if clipboard.holds_text():
        row("Bytes:", ui.format_bytes(clipboard.raw.stat().st_size))
    else:
        files, directories = clipboard.counts()
        row("Files:", files)
        row("Directories:", directories)
    written = clipboard.last_write_time()
    if written is not None:
        row("Last written", written.strftime("%Y-%m-%d %H:%M:%S"))
    owner = clipboard.lock_owner()
    row("Locked?", "Yes" if owner is not None else "No")
    if owner is not None:
        row("Locked by process with pid", owner)
    note = clipboard.read_note()
    if note is not None:
        row("Note:", note)
    else:
        out.print("[info]• There is no note for this clipboard.[/info]")


# --- add / remove ---


def add_files(ctx: ActionContext, items: Sequence[str]) -> None:
    if ctx.clipboard.holds_text():
        raise InvalidActionError("You can't add items to text.", "Try copying text first, or add text instead.")
    ctx.clipboard.ensure()
    copy_batch(resolve_items(items), ctx.clipboard.data, ctx.aggregator, strategy=ctx.strategy)


def add_data(ctx: ActionContext, text: Optional[str] = None) -> None:
    """Append text (or stdin when `text` is None) to a text clipboard."""
    clipboard = ctx.clipboard
    if not clipboard.holds_text() and not clipboard.is_empty():
        raise InvalidActionError("You can't add text to items.", "Try copying text first, or add a file instead.")
    content = ctx.read_stdin() if text is None else text
    written = clipboard.write_text(content, append=True)
    ctx.aggregator.record_success(ItemKind.BYTES, written)


def remove(ctx: ActionContext, patterns: Sequence[str]) -> None:
    """
    Remove whatever matches: regex substitutions for text, whole-name matches for items.

    Raises:
        PatternCompileError: before anything is touched
        EmptyMatchError: if no pattern matched anything
    """
    if not patterns:
        raise InvalidActionError("You need to give at least one pattern to remove.", "Try adding a pattern.")
    compiled = compile_patterns(patterns)
    clipboard = ctx.clipboard

    if clipboard.holds_text():
        content = clipboard.read_bytes().decode("utf-8", errors="surrogateescape")
        before = len(content.encode("utf-8", errors="surrogateescape"))
        for pattern in compiled:
            content = pattern.sub("", content)
        updated = content.encode("utf-8", errors="surrogateescape")
        if len(updated) == before:
            raise EmptyMatchError()
        clipboard.write_text(updated)
        ctx.aggregator.record_success(ItemKind.BYTES, before - len(updated))
        return

    matched = 0
    for entry in clipboard.entries():
        if not matches_any(entry.name, compiled):
            continue
        matched += 1
        kind = kind_of(entry)
        try:
            remove_path(entry)
        except OSError as e:
            ctx.aggregator.record_failure(entry.name, e)
            continue
        ctx.aggregator.record_success(kind)
    if matched == 0:
        raise EmptyMatchError()


# --- note ---


def note(ctx: ActionContext, args: Sequence[str], stdout_is_tty: bool = True) -> None:
    clipboard = ctx.clipboard
    if len(args) > 1:
        raise InvalidActionError(
            "You can't add multiple items to a note.", "Try providing a single piece of text instead."
        )
    if len(args) == 1:
        text = args[0]
        if text == "":
            clipboard.remove_note()
            ui.log_success("Removed note", ctx.err_console)
        else:
            clipboard.write_note(text)
            ui.log_success(f'Saved note "{escape(text)}"', ctx.err_console)
        return

    content = clipboard.read_note()
    if content is None:
        ctx.err_console.print("[info]• There is no note for this clipboard.[/info]")
    elif stdout_is_tty:
        ctx.console.print(f"[info]• Note for this clipboard: {escape(content)}[/info]")
    else:
        ctx.write_stdout(content.encode("utf-8"))


def note_pipe(ctx: ActionContext) -> None:
    content = ctx.read_stdin().decode("utf-8", errors="replace")
    ctx.clipboard.write_note(content)
    ui.log_success(f'Saved note "{escape(content)}"', ctx.err_console)


# --- load ---


def load(ctx: ActionContext, destinations: Sequence[str] = ()) -> List[str]:
    """
    Copy this clipboard's contents into other clipboards, replacing what they hold.

    Returns:
        Names of the clipboards that were loaded
    """
    source = ctx.clipboard
    if source.is_empty():
        raise ClipboardEmptyError(source.name)

    names = list(destinations) or [ctx.settings.default_clipboard]
    if source.name in names:
        raise InvalidActionError(
            "You can't load a clipboard into itself.",
            "Try choosing a different source instead, or choose different destinations.",
        )

    targets = [Clipboard(name, ctx.settings) for name in names]
    loaded: List[str] = []
    for destination in targets:
        try:
            destination.clear()
            shutil.copytree(source.data, destination.data, symlinks=True, dirs_exist_ok=True)
        except OSError as e:
            ctx.aggregator.record_failure(destination.name, e)
            continue
        loaded.append(destination.name)
        logger.debug("Loaded %s into %s", source.name, destination.name)

    ui.log_success(f"Loaded {len(loaded)} clipboard{'' if len(loaded) == 1 else 's'}", ctx.err_console)
    return loaded
