from __future__ import annotations

from pathlib import Path

import pytest

from clipboard_manager.errors import PatternCompileError
from clipboard_manager.resolver import (
    IOType,
    Item,
    compile_patterns,
    detect_io_type,
    filter_entries,
    matches_any,
    resolve_items,
)


def test_patterns_match_whole_names():
    patterns = compile_patterns(["a.*"])
    assert matches_any("a.txt", patterns)
    assert matches_any("abc", patterns)
    assert not matches_any("ba.txt", patterns)


def test_no_patterns_match_everything():
    assert matches_any("anything", [])


def test_invalid_pattern_raises():
    with pytest.raises(PatternCompileError) as exc:
        compile_patterns(["ok", "(unclosed"])
    assert exc.value.pattern == "(unclosed"
    assert exc.value.hint


def test_filter_entries_sorted_and_filtered(tmp_path: Path):
    for name in ("b.txt", "a.txt", "c.md"):
        (tmp_path / name).write_text(name)
    names = [p.name for p in filter_entries(tmp_path, compile_patterns([r".*\.txt"]))]
    assert names == ["a.txt", "b.txt"]
    assert filter_entries(tmp_path / "missing", []) == []


def test_resolve_items_dedupes_keeping_order():
    items = resolve_items(["b", "a/", "b", "c"])
    assert items == [Item("b"), Item("a/"), Item("c")]
    assert items[1].raw.endswith("/")


def test_detect_io_type(tmp_path: Path):
    existing = tmp_path / "f.txt"
    existing.write_text("x")
    assert detect_io_type([], stdin_is_tty=False) is IOType.PIPE
    assert detect_io_type([], stdin_is_tty=True) is IOType.FILE
    assert detect_io_type(["not a file at all"], stdin_is_tty=True) is IOType.TEXT
    assert detect_io_type([str(existing)], stdin_is_tty=True) is IOType.FILE
    assert detect_io_type([str(existing)], stdin_is_tty=True, force_text=True) is IOType.TEXT
    assert detect_io_type(["missing1", "missing2"], stdin_is_tty=True) is IOType.FILE
