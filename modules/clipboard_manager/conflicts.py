"""
Decides what happens when a pasted item already exists at its destination.

The resolver starts every batch in the ask state (policy None). A decision of
SKIP_ALL or REPLACE_ALL is remembered for the rest of the batch; SKIP_ONCE and
REPLACE_ONCE only apply to the item being asked about.
"""

from __future__ import annotations

import logging
import sys
from enum import Enum
from typing import Callable, Optional

from rich.console import Console
from rich.prompt import Prompt

from . import ui

logger = logging.getLogger(__name__)


class ConflictPolicy(Enum):
    SKIP_ONCE = "skip"
    REPLACE_ONCE = "replace"
    SKIP_ALL = "skip-all"
    REPLACE_ALL = "replace-all"

    @property
    def is_sticky(self) -> bool:
        return self in (ConflictPolicy.SKIP_ALL, ConflictPolicy.REPLACE_ALL)

    @property
    def replaces(self) -> bool:
        return self in (ConflictPolicy.REPLACE_ONCE, ConflictPolicy.REPLACE_ALL)


Decider = Callable[[str], ConflictPolicy]

_ANSWERS = {
    "y": ConflictPolicy.REPLACE_ONCE,
    "yes": ConflictPolicy.REPLACE_ONCE,
    "n": ConflictPolicy.SKIP_ONCE,
    "no": ConflictPolicy.SKIP_ONCE,
    "a": ConflictPolicy.REPLACE_ALL,
    "all": ConflictPolicy.REPLACE_ALL,
    "s": ConflictPolicy.SKIP_ALL,
    "skip": ConflictPolicy.SKIP_ALL,
}


def policy_from_name(name: Optional[str]) -> Optional[ConflictPolicy]:
    """
    Parse a configured starting policy. 'ask' (or nothing) means no stored decision;
    only the sticky policies make sense before the first conflict.

    Raises:
        ValueError: for an unknown name.
    """
    if name is None:
        return None
    key = name.strip().lower()
    if key in ("", "ask"):
        return None
    for policy in (ConflictPolicy.SKIP_ALL, ConflictPolicy.REPLACE_ALL):
        if policy.value == key:
            return policy
    raise ValueError(f"Unknown conflict policy '{name}'. Use ask, skip-all or replace-all.")


def parse_answer(answer: str) -> Optional[ConflictPolicy]:
    return _ANSWERS.get(answer.strip().lower())


def prompt_decision(filename: str, console: Optional[Console] = None, stdin=None) -> ConflictPolicy:
    """Ask on the terminal; a non-interactive stdin skips everything."""
    stdin = stdin if stdin is not None else sys.stdin
    if not stdin.isatty():
        logger.debug("stdin is not a terminal; skipping all conflicts")
        return ConflictPolicy.SKIP_ALL
    console = console or ui.err_console
    while True:
        answer = Prompt.ask(
            f"[progress]The item [bold]{filename}[/bold] already exists here. Would you like to replace it? "
            "[help]Answer [bold]a[/bold]/[bold]all[/bold] to replace all, "
            "[bold]s[/bold]/[bold]skip[/bold] to skip all.[/help] [bold]\\[(y)es/(n)o][/bold]",
            console=console,
            default="n",
            show_default=False,
        )
        policy = parse_answer(answer)
        if policy is not None:
            return policy
        console.print("[error]Sorry, that wasn't a valid choice. Try again.[/error]")


class ConflictResolver:
    def __init__(self, decide: Decider, policy: Optional[ConflictPolicy] = None):
        self.decide = decide
        self.initial = policy if policy is not None and policy.is_sticky else None
        self.policy: Optional[ConflictPolicy] = self.initial

    def reset(self) -> None:
        self.policy = self.initial

    def should_replace(self, filename: str) -> bool:
        if self.policy is ConflictPolicy.SKIP_ALL:
            logger.debug("Skipping %s (skip all)", filename)
            return False
        if self.policy is ConflictPolicy.REPLACE_ALL:
            return True
        decision = self.decide(filename)
        if decision.is_sticky:
            self.policy = decision
        logger.debug("Conflict on %s resolved as %s", filename, decision.value)
        return decision.replaces
