from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from application.scope import in_scope, partition, recombine
from core import PathResolutionError, Record

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _rec(path: str, minutes: int, message: str = "") -> Record:
    return Record(T0 + timedelta(minutes=minutes), Path(path), message or path)


@pytest.fixture
def records():
    return [_rec("/a/x", 0), _rec("/b/z", 1), _rec("/a/y", 2)]


def test_no_filters_selects_everything(records):
    selected, rest = partition(records, [])
    assert selected == records
    assert rest == []


def test_single_filter_keeps_relative_order(records):
    selected, rest = partition(records, [Path("/a")])
    assert [r.message for r in selected] == ["/a/x", "/a/y"]
    assert [r.message for r in rest] == ["/b/z"]


def test_filters_use_union_semantics(records):
    selected, rest = partition(records, [Path("/a"), Path("/b")])
    assert selected == records
    assert rest == []


def test_exact_path_is_in_scope():
    assert in_scope(_rec("/a/x", 0), [Path("/a/x")])


def test_containment_is_component_wise():
    assert not in_scope(_rec("/a/xy", 0), [Path("/a/x")])
    assert in_scope(_rec("/a/x/deeper", 0), [Path("/a/x")])


def test_relative_filter_is_rejected(records):
    with pytest.raises(PathResolutionError):
        partition(records, [Path("relative/dir")])


def test_recombine_restores_creation_order():
    t1, t2, t3 = _rec("/a", 1), _rec("/b", 2), _rec("/a", 3)
    merged = recombine([t3, t1], [t2])
    assert merged == [t1, t2, t3]


def test_recombine_empty():
    assert recombine([], []) == []
