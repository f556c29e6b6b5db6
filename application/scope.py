"""Scope partitioning and recombination.

Pure domain logic: no filesystem access. Filters are expected to be
canonical already (see core.paths.canonicalize_path).
"""

from pathlib import Path, PurePath
from typing import Iterable, List, Sequence, Tuple

from core import PathResolutionError, Record


def _validate_filters(filters: Iterable[PurePath]) -> List[PurePath]:
    checked: List[PurePath] = []
    for raw in filters:
        path = PurePath(raw)
        if not path.is_absolute():
            raise PathResolutionError(f"Scope filter is not a canonical absolute path: '{raw}'")
        checked.append(path)
    return checked


def in_scope(record: Record, filters: Sequence[PurePath]) -> bool:
    """True when the record's origin path equals or is nested under any filter."""
    if not filters:
        return True
    origin = PurePath(record.origin_path)
    return any(origin.is_relative_to(f) for f in filters)


def partition(records: Sequence[Record], filters: Iterable[Path] = ()) -> Tuple[List[Record], List[Record]]:
    """Split records into (in_scope, out_of_scope), keeping source order in both."""
    checked = _validate_filters(filters)
    if not checked:
        return list(records), []
    selected: List[Record] = []
    rest: List[Record] = []
    for record in records:
        if in_scope(record, checked):
            selected.append(record)
        else:
            rest.append(record)
    return selected, rest


def recombine(selected: Sequence[Record], rest: Sequence[Record]) -> List[Record]:
    """Merge both subsets back into canonical order (ascending creation time)."""
    merged = list(selected) + list(rest)
    merged.sort(key=lambda r: r.created_at)
    return merged


__all__ = ["in_scope", "partition", "recombine"]
