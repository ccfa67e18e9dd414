from __future__ import annotations

import os
from pathlib import Path

import pytest

from clipboard_manager import store
from clipboard_manager.errors import ClipboardLockedError, InvalidClipboardName
from clipboard_manager.store import Clipboard, list_clipboards


@pytest.mark.parametrize("name", ["", ".", "..", "a/b", "has space"])
def test_invalid_names(settings, name):
    with pytest.raises(InvalidClipboardName):
        Clipboard(name, settings)


def test_persistent_names_live_under_persistent_root(settings):
    assert Clipboard("keep_", settings).root == Path(settings.persistent_dir) / "keep_"
    assert Clipboard("0", settings).root == Path(settings.temporary_dir) / "0"
    settings.always_persist = True
    assert Clipboard("0", settings).is_persistent


def test_text_payload(clipboard):
    assert clipboard.write_text("hello") == 5
    assert clipboard.write_text(b" world", append=True) == 6
    assert clipboard.holds_text()
    assert clipboard.read_text() == "hello world"


def test_clear_forgets_entries_and_cut(clipboard, tmp_path):
    (clipboard.data / "a.txt").write_text("a")
    (clipboard.data / "d").mkdir()
    clipboard.append_original(tmp_path / "a.txt")
    assert clipboard.counts() == (1, 1)
    clipboard.clear()
    assert clipboard.is_empty()
    assert clipboard.originals() == []
    assert clipboard.data.is_dir()


def test_remove_originals_keeps_unconsumed_entries(clipboard, tmp_path):
    origin = tmp_path / "origin"
    origin.mkdir()
    for name in ("a.txt", "b.txt"):
        (origin / name).write_text(name)
        (clipboard.data / name).write_text(name)
        clipboard.append_original(origin / name)

    removed = clipboard.remove_originals(["a.txt"])

    assert removed == [origin / "a.txt"]
    assert not (origin / "a.txt").exists()
    assert not (clipboard.data / "a.txt").exists()
    assert (clipboard.data / "b.txt").exists()
    assert clipboard.originals() == [origin / "b.txt"]

    clipboard.remove_originals()
    assert not (origin / "b.txt").exists()
    assert not clipboard.originals_file.exists()


def test_notes(clipboard):
    assert clipboard.read_note() is None
    clipboard.write_note("remember me")
    assert clipboard.read_note() == "remember me"
    assert clipboard.remove_note() is True
    assert clipboard.remove_note() is False


def test_lock_writes_pid_and_releases(clipboard):
    with clipboard.lock():
        assert clipboard.lock_owner() == os.getpid()
    assert clipboard.lock_owner() is None


def test_lock_held_by_live_process(clipboard, monkeypatch):
    clipboard.lock_file.write_text("4242")
    monkeypatch.setattr(store.psutil, "pid_exists", lambda pid: True)
    with pytest.raises(ClipboardLockedError) as exc:
        clipboard.lock().acquire()
    assert exc.value.pid == 4242
    assert clipboard.lock_owner() == 4242


def test_stale_lock_is_taken_over(clipboard, monkeypatch):
    clipboard.lock_file.write_text("4242")
    monkeypatch.setattr(store.psutil, "pid_exists", lambda pid: False)
    lock = clipboard.lock()
    lock.acquire()
    assert clipboard.lock_owner() == os.getpid()
    lock.release()
    assert not clipboard.lock_file.exists()


def test_list_clipboards_only_lists_non_empty(settings):
    Clipboard("1", settings).ensure().write_text("x")
    Clipboard("empty", settings).ensure()
    keep = Clipboard("keep_", settings).ensure()
    (keep.data / "f").write_text("f")

    summaries = list_clipboards(settings)

    assert [(s.name, s.persistent) for s in summaries] == [("1", False), ("keep_", True)]
