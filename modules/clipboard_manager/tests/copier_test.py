from __future__ import annotations

import errno
import os
from pathlib import Path

from clipboard_manager import copier
from clipboard_manager.copier import CopyStrategy, copy_batch, copy_item, destination_name
from clipboard_manager.results import Failure, ItemKind, ResultAggregator, Success


def _source(tmp_path: Path, name: str = "a.txt", text: str = "hello") -> Path:
    src = tmp_path / "src"
    src.mkdir(exist_ok=True)
    path = src / name
    path.write_text(text)
    return path


def test_destination_name():
    assert destination_name("photos/summer.jpg") == "summer.jpg"
    assert destination_name("photos/") == "photos"
    assert destination_name("/") == "root"


def test_destination_name_of_dot_uses_resolved_directory(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert destination_name(".") == tmp_path.name


def test_fast_copy_hard_links(tmp_path: Path):
    src = _source(tmp_path)
    dest = tmp_path / "dest"
    dest.mkdir()
    agg = ResultAggregator()
    outcome = copy_item(str(src), dest, agg)
    assert outcome == Success(ItemKind.FILE)
    assert os.path.samefile(src, dest / "a.txt")
    assert agg.files == 1


def test_safe_copy_makes_independent_copy(tmp_path: Path):
    src = _source(tmp_path)
    dest = tmp_path / "dest"
    dest.mkdir()
    agg = ResultAggregator()
    copy_item(str(src), dest, agg, strategy=CopyStrategy.SAFE)
    assert (dest / "a.txt").read_text() == "hello"
    assert not os.path.samefile(src, dest / "a.txt")


def test_directory_with_trailing_separator(tmp_path: Path):
    folder = tmp_path / "folder"
    (folder / "inner").mkdir(parents=True)
    (folder / "inner" / "x.txt").write_text("x")
    dest = tmp_path / "dest"
    dest.mkdir()
    agg = ResultAggregator()
    copy_item(str(folder) + os.sep, dest, agg)
    assert (dest / "folder" / "inner" / "x.txt").read_text() == "x"
    assert agg.directories == 1
    assert agg.files == 0


def test_cross_device_falls_back_to_safe_copy(tmp_path: Path, monkeypatch):
    src = _source(tmp_path)
    dest = tmp_path / "dest"
    dest.mkdir()

    def cross_device(a, b):
        raise OSError(errno.EXDEV, "Invalid cross-device link")

    monkeypatch.setattr(copier.os, "link", cross_device)
    agg = ResultAggregator()
    outcome = copy_item(str(src), dest, agg)
    assert isinstance(outcome, Success)
    assert (dest / "a.txt").read_text() == "hello"
    assert len(agg.outcomes) == 1


def test_failed_fallback_records_one_failure(tmp_path: Path, monkeypatch):
    src = _source(tmp_path)
    dest = tmp_path / "dest"
    dest.mkdir()

    def cross_device(a, b):
        raise OSError(errno.EXDEV, "Invalid cross-device link")

    def denied(*args, **kwargs):
        raise OSError(errno.EACCES, "Permission denied")

    monkeypatch.setattr(copier.os, "link", cross_device)
    monkeypatch.setattr(copier.shutil, "copy2", denied)
    agg = ResultAggregator()
    outcome = copy_item(str(src), dest, agg)
    assert isinstance(outcome, Failure)
    assert outcome.error_code == errno.EACCES
    assert agg.outcomes == [outcome]


def test_other_errors_are_not_retried(tmp_path: Path, monkeypatch):
    src = _source(tmp_path)
    dest = tmp_path / "dest"
    dest.mkdir()
    calls = []

    def not_permitted(a, b):
        raise OSError(errno.EPERM, "Operation not permitted")

    monkeypatch.setattr(copier.os, "link", not_permitted)
    monkeypatch.setattr(copier.shutil, "copy2", lambda *a, **k: calls.append(a))
    agg = ResultAggregator()
    outcome = copy_item(str(src), dest, agg)
    assert isinstance(outcome, Failure)
    assert outcome.error_code == errno.EPERM
    assert calls == []


def test_missing_source_fails_without_recording_original(tmp_path: Path):
    dest = tmp_path / "dest"
    dest.mkdir()
    recorded = []
    agg = ResultAggregator()
    outcome = copy_item(str(tmp_path / "nope"), dest, agg, record_original=recorded.append)
    assert isinstance(outcome, Failure)
    assert outcome.error_code == errno.ENOENT
    assert recorded == []


def test_batch_keeps_going_after_a_failure(tmp_path: Path):
    good = _source(tmp_path, "good.txt")
    dest = tmp_path / "dest"
    dest.mkdir()
    recorded = []
    agg = ResultAggregator()
    outcomes = copy_batch([str(tmp_path / "missing"), str(good)], dest, agg, record_original=recorded.append)
    assert [type(o) for o in outcomes] == [Failure, Success]
    assert recorded == [good]
    assert agg.files == 1
    assert len(agg.failures) == 1
