#!/usr/bin/env python3
"""
cb: cut, copy, and paste anything from the terminal.

Subcommands:
- copy / cut     files, directories, a piece of text, or stdin into a clipboard
- add            more files (or text) into an existing clipboard
- paste          clipboard contents into the current directory (or stdout when piped)
- show / status / info
- clear, remove  empty a clipboard, or drop what matches regex patterns
- note           show, set, or remove a clipboard's note
- load           copy one clipboard into others

Notes:
- Clipboards are named with -c/--clipboard (default "0"); names ending in '_' persist.
- Paste/show/remove patterns are regular expressions matched against whole filenames.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__, actions, ui
from .actions import ActionContext
from .config import load_settings
from .conflicts import ConflictPolicy, ConflictResolver, policy_from_name, prompt_decision
from .copier import CopyStrategy
from .errors import ClipboardError, ConfigError, InvalidActionError
from .resolver import IOType, detect_io_type
from .store import Clipboard

logger = logging.getLogger(__name__)

LOG_LEVELS = {
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def _stdin_is_tty() -> bool:
    return sys.stdin is not None and sys.stdin.isatty()


def _stdout_is_tty() -> bool:
    return sys.stdout is not None and sys.stdout.isatty()


# =====================================================================================
# Subcommand implementations
# Each returns the verb for the end-of-action summary, or None when it reported itself.
# =====================================================================================

def cmd_copy(args, ctx: ActionContext) -> Optional[str]:
    cut = args.cmd == "cut"
    io_type = detect_io_type(args.items, _stdin_is_tty(), args.text)
    if io_type is IOType.PIPE:
        actions.pipe_in(ctx, cut=cut)
    elif io_type is IOType.TEXT:
        actions.copy_text(ctx, " ".join(args.items), cut=cut)
        return None
    elif not args.items:
        raise InvalidActionError(f"You need to choose something to {args.cmd}.", "Try adding the items you want.")
    else:
        actions.copy(ctx, args.items, cut=cut)
    return "cut" if cut else "copied"


def cmd_add(args, ctx: ActionContext) -> Optional[str]:
    io_type = detect_io_type(args.items, _stdin_is_tty(), args.text)
    if io_type is IOType.PIPE:
        actions.add_data(ctx)
    elif io_type is IOType.TEXT:
        actions.add_data(ctx, " ".join(args.items))
    elif not args.items:
        raise InvalidActionError("You need to choose something to add.", "Try adding the items you want.")
    else:
        actions.add_files(ctx, args.items)
    return "added"


def cmd_paste(args, ctx: ActionContext) -> Optional[str]:
    if not _stdout_is_tty() and not args.patterns:
        actions.pipe_out(ctx)
    else:
        actions.paste(ctx, args.patterns)
    return "pasted"


def cmd_show(args, ctx: ActionContext) -> Optional[str]:
    actions.show(ctx, args.patterns)
    return None


def cmd_clear(args, ctx: ActionContext) -> Optional[str]:
    actions.clear(ctx)
    return None


def cmd_remove(args, ctx: ActionContext) -> Optional[str]:
    patterns: List[str] = list(args.patterns)
    if not patterns and not _stdin_is_tty():
        patterns = [ctx.read_stdin().decode("utf-8", errors="surrogateescape").rstrip("\n")]
    actions.remove(ctx, patterns)
    return "removed"


def cmd_note(args, ctx: ActionContext) -> Optional[str]:
    if not args.text and not _stdin_is_tty():
        actions.note_pipe(ctx)
    else:
        actions.note(ctx, args.text, stdout_is_tty=_stdout_is_tty())
    return None


def cmd_status(args, ctx: ActionContext) -> Optional[str]:
    actions.status(ctx)
    return None


def cmd_info(args, ctx: ActionContext) -> Optional[str]:
    actions.info(ctx)
    return None


def cmd_load(args, ctx: ActionContext) -> Optional[str]:
    actions.load(ctx, args.destinations)
    return "loaded"


# =====================================================================================
# Argument parsing / main
# =====================================================================================

def _common_options() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-c", "--clipboard", default=None,
                        help="Clipboard to use (default: configured default, usually '0').")
    copy_mode = common.add_mutually_exclusive_group()
    copy_mode.add_argument("--safe-copy", dest="safe_copy", action="store_const", const=True, default=None,
                           help="Always make full copies instead of hard links.")
    copy_mode.add_argument("--fast-copy", dest="safe_copy", action="store_const", const=False,
                           help="Hard-link files when possible (default).")
    conflict = common.add_mutually_exclusive_group()
    conflict.add_argument("--replace-all", dest="conflict", action="store_const",
                          const=ConflictPolicy.REPLACE_ALL.value, default=None,
                          help="Replace existing items on paste without asking.")
    conflict.add_argument("--skip-all", dest="conflict", action="store_const",
                          const=ConflictPolicy.SKIP_ALL.value,
                          help="Keep existing items on paste without asking.")
    common.add_argument("-s", "--silent", action="store_true", default=None,
                        help="Only print errors.")
    common.add_argument("-C", "--config", type=Path, metavar="PATH", default=None,
                        help="Path to config file (default: platform-specific).")
    common.add_argument("-l", "--log-level", choices=list(LOG_LEVELS), default="warning",
                        help="Set logging level (default: warning).")
    return common


def build_parser() -> argparse.ArgumentParser:
    common = _common_options()
    p = argparse.ArgumentParser(
        prog="cb",
        description="Cut, copy, and paste anything, anywhere, all from the terminal.",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    p.add_argument("-v", "--version", action="version", version=f"cb {__version__}")
    sub = p.add_subparsers(dest="cmd", required=True)

    for name, help_text in (("copy", "Copy items, text, or stdin into a clipboard."),
                            ("cut", "Like copy, but the originals are removed when pasted.")):
        sp = sub.add_parser(name, parents=[common], help=help_text)
        sp.add_argument("items", nargs="*", help="Files/directories, or a single piece of text.")
        sp.add_argument("-t", "--text", action="store_true", help="Treat the arguments as text.")
        sp.set_defaults(func=cmd_copy, locks=True)

    sp = sub.add_parser("add", parents=[common], help="Add items or text to a clipboard.")
    sp.add_argument("items", nargs="*", help="Files/directories, or a single piece of text.")
    sp.add_argument("-t", "--text", action="store_true", help="Treat the arguments as text.")
    sp.set_defaults(func=cmd_add, locks=True)

    sp = sub.add_parser("paste", parents=[common],
                        help="Paste into the current directory (stdout when piped).")
    sp.add_argument("patterns", nargs="*", help="Only paste entries whose whole name matches a regex.")
    sp.set_defaults(func=cmd_paste, locks=True)

    sp = sub.add_parser("show", parents=[common], help="Show what a clipboard holds.")
    sp.add_argument("patterns", nargs="*", help="Only show entries whose whole name matches a regex.")
    sp.set_defaults(func=cmd_show, locks=False)

    sp = sub.add_parser("clear", parents=[common], help="Empty a clipboard.")
    sp.set_defaults(func=cmd_clear, locks=True)

    sp = sub.add_parser("remove", parents=[common], help="Remove entries (or text) matching regex patterns.")
    sp.add_argument("patterns", nargs="*", help="Regex patterns (read from stdin when piped).")
    sp.set_defaults(func=cmd_remove, locks=True)

    sp = sub.add_parser("note", parents=[common], help="Show, set, or remove (with \"\") a clipboard's note.")
    sp.add_argument("text", nargs="*", help="Note text.")
    sp.set_defaults(func=cmd_note, locks=True)

    sp = sub.add_parser("status", parents=[common], help="Show every clipboard with contents.")
    sp.set_defaults(func=cmd_status, locks=False)

    sp = sub.add_parser("info", parents=[common], help="Show details about a clipboard.")
    sp.set_defaults(func=cmd_info, locks=False)

    sp = sub.add_parser("load", parents=[common], help="Copy this clipboard into other clipboards.")
    sp.add_argument("destinations", nargs="*", help="Destination clipboards (default: the default clipboard).")
    sp.set_defaults(func=cmd_load, locks=True)

    return p


def build_context(args) -> ActionContext:
    settings = load_settings(args.config)
    if args.safe_copy is not None:
        settings.use_safe_copy = args.safe_copy
    if args.silent:
        settings.silent = True
    try:
        policy = policy_from_name(args.conflict or settings.conflict_policy)
    except ValueError as e:
        raise ConfigError(str(e))

    ui.set_silent(settings.silent)
    clipboard = Clipboard(args.clipboard or settings.default_clipboard, settings)
    return ActionContext(
        clipboard=clipboard,
        settings=settings,
        resolver=ConflictResolver(prompt_decision, policy),
        strategy=CopyStrategy.from_safe_flag(settings.use_safe_copy),
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=LOG_LEVELS[args.log_level],
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        ctx = build_context(args)
        if args.locks:
            with ctx.clipboard.lock():
                verb = args.func(args, ctx)
        else:
            verb = args.func(args, ctx)
    except ClipboardError as e:
        ui.log_error(e.message, e.hint)
        return e.exit_code
    except KeyboardInterrupt:
        ui.log_error("Cancelled.")
        return 130

    if verb:
        ui.print_summary(verb, ctx.aggregator, ctx.err_console)
    logger.debug("%s finished: %s", args.cmd, ctx.aggregator)
    return 0 if ctx.aggregator.ok else 1


if __name__ == "__main__":
    sys.exit(main())
