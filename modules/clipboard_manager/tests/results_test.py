from __future__ import annotations

import errno

import pytest

from clipboard_manager.results import Failure, ItemKind, ResultAggregator, Success


def test_counters_are_independent():
    agg = ResultAggregator()
    agg.record_success(ItemKind.FILE)
    agg.record_success(ItemKind.FILE)
    agg.record_success(ItemKind.DIRECTORY)
    agg.record_success(ItemKind.BYTES, 42)
    assert (agg.files, agg.directories, agg.bytes) == (2, 1, 42)
    assert agg.total_items == 3
    assert agg.ok


def test_negative_amount_rejected():
    agg = ResultAggregator()
    with pytest.raises(ValueError):
        agg.record_success(ItemKind.BYTES, -1)
    assert agg.is_empty


def test_failure_from_oserror_keeps_errno_and_message():
    agg = ResultAggregator()
    outcome = agg.record_failure("a.txt", OSError(errno.EACCES, "Permission denied"))
    assert outcome == Failure("a.txt", errno.EACCES, "Permission denied")
    assert outcome.describe() == f"Permission denied (errno {errno.EACCES})"
    assert not agg.ok
    assert agg.total_items == 0


def test_failure_from_plain_code():
    agg = ResultAggregator()
    outcome = agg.record_failure("b", errno.ENOENT)
    assert outcome.error_code == errno.ENOENT
    assert outcome.describe() == f"errno {errno.ENOENT}"


def test_record_replays_outcomes_in_order():
    agg = ResultAggregator()
    agg.record(Success(ItemKind.FILE))
    agg.record(Failure("x", errno.EIO))
    agg.record(Success(ItemKind.BYTES, 5))
    assert [type(o) for o in agg.outcomes] == [Success, Failure, Success]
    assert agg.files == 1
    assert agg.bytes == 5
    assert len(agg.failures) == 1
