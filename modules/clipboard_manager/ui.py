"""
ui.py

Console output for clipboard actions, built on Rich:
  - Themed stdout/stderr consoles (success, error, info, help, progress).
  - log_success, log_error, log_info, log_warning helpers honouring silent mode.
  - print_summary: the end-of-action line plus a table of failed items.

Status goes to stderr so that stdout stays clean for piped content.
"""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

from .results import ResultAggregator

THEME = Theme(
    {
        "success": "green",
        "error": "red bold",
        "info": "blue",
        "help": "cyan",
        "progress": "yellow",
        "warn": "yellow bold",
        "dim": "dim",
    }
)

console = Console(theme=THEME, highlight=False)
err_console = Console(theme=THEME, highlight=False, stderr=True)

SILENT = False


def set_silent(silent: bool) -> None:
    """Set global silence. If True, only errors are printed."""
    global SILENT
    SILENT = bool(silent)


def make_console(file=None, stderr: bool = False, width: Optional[int] = None) -> Console:
    return Console(theme=THEME, highlight=False, file=file, stderr=stderr, width=width)


# ---------- Basic Logging ----------


def log_success(message: str, con: Optional[Console] = None) -> None:
    if not SILENT:
        (con or err_console).print(f"[success]✅ {message}[/]")


def log_info(message: str, con: Optional[Console] = None) -> None:
    if not SILENT:
        (con or err_console).print(f"[info]• {message}[/]")


def log_warning(message: str, con: Optional[Console] = None) -> None:
    if not SILENT:
        (con or err_console).print(f"[warn]⚠️  {message}[/]")


def log_error(message: str, hint: Optional[str] = None, con: Optional[Console] = None) -> None:
    text = f"[error]❌ {message}[/]"
    if hint:
        text += f" [help]{hint}[/]"
    (con or err_console).print(text)


# ---------- Formatting ----------


def format_bytes(num_bytes: int) -> str:
    """
    Format a byte count using binary units with two decimals.

    Examples:
        0 -> "0 B"
        1024 -> "1.00 KiB"
    """
    value = float(num_bytes)
    units = ["B", "KiB", "MiB", "GiB", "TiB", "PiB"]
    idx = 0
    while value >= 1024.0 and idx < len(units) - 1:
        value /= 1024.0
        idx += 1
    if units[idx] == "B":
        return f"{int(value)} {units[idx]}"
    return f"{value:.2f} {units[idx]}"


def _plural(count: int, word: str, plural: Optional[str] = None) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {plural or word + 's'}"


def describe_totals(aggregator: ResultAggregator) -> str:
    parts = []
    if aggregator.files:
        parts.append(_plural(aggregator.files, "file"))
    if aggregator.directories:
        parts.append(_plural(aggregator.directories, "directory", "directories"))
    if aggregator.bytes:
        parts.append(format_bytes(aggregator.bytes))
    return " and ".join(parts)


def print_failures(aggregator: ResultAggregator, con: Optional[Console] = None) -> None:
    con = con or err_console
    table = Table(title="Items that failed", title_style="error")
    table.add_column("Item", style="bold", overflow="fold")
    table.add_column("Error", style="error", overflow="fold")
    for failure in aggregator.failures:
        table.add_row(escape(failure.label), escape(failure.describe()))
    con.print(table)


def print_summary(verb: str, aggregator: ResultAggregator, con: Optional[Console] = None) -> None:
    """One line for what worked, then a table for what didn't."""
    con = con or err_console
    totals = describe_totals(aggregator)
    if totals:
        log_success(f"{verb.capitalize()} {totals}", con)
    if aggregator.failures:
        log_error(
            f"{_plural(len(aggregator.failures), 'item')} couldn't be {verb.lower()}.",
            "See the table below for what went wrong.",
            con,
        )
        print_failures(aggregator, con)
