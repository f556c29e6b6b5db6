"""Application-level service: load, partition, mutate, recombine, save.

Positions passed to ``delete``/``complete`` are 1-based and relative to the
in-scope listing produced by the same ``filters``; they are not indices into
the full store.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence

from application.mutations import (
    AddItem,
    CompleteItem,
    DeleteItem,
    ListItems,
    Mutation,
    apply_mutation,
    check_position,
    is_read_only,
)
from application.ports import RecordStore
from application.scope import partition, recombine
from core import Record, current_directory, local_now

logger = logging.getLogger("scoped_todo.manager")

Clock = Callable[[], datetime]


@dataclass
class CycleResult:
    """Outcome of one invocation: the in-scope view after mutation."""

    mutation: Mutation
    in_scope: List[Record] = field(default_factory=list)
    affected: Optional[Record] = None
    saved: bool = False


class TodoManager:
    def __init__(self, store: RecordStore, clock: Clock = local_now):
        self.store = store
        self.clock = clock

    def run(self, mutation: Mutation, filters: Iterable[Path] = ()) -> CycleResult:
        """Run one full cycle for ``mutation``; listing never saves."""
        filters = list(filters)
        if is_read_only(mutation):
            selected, _ = partition(self.store.load(), filters)
            return CycleResult(mutation=mutation, in_scope=selected)
        with self.store.lock():
            return self._mutate(mutation, filters)

    def _mutate(self, mutation: Mutation, filters: List[Path]) -> CycleResult:
        selected, rest = partition(self.store.load(), filters)
        affected = self._target(selected, mutation)
        apply_mutation(selected, mutation, now=self.clock())
        if isinstance(mutation, AddItem):
            affected = selected[-1]
        merged = recombine(selected, rest)
        self.store.save(merged)
        logger.debug(
            "%s applied: %d in scope, %d out of scope",
            type(mutation).__name__,
            len(selected),
            len(rest),
        )
        return CycleResult(mutation=mutation, in_scope=selected, affected=affected, saved=True)

    @staticmethod
    def _target(selected: Sequence[Record], mutation: Mutation) -> Optional[Record]:
        if isinstance(mutation, (DeleteItem, CompleteItem)):
            return selected[check_position(mutation.position, len(selected))]
        return None

    def list_items(self, filters: Iterable[Path] = ()) -> List[Record]:
        return self.run(ListItems(), filters).in_scope

    def add(self, words: Sequence[str], filters: Iterable[Path] = (), origin_path: Optional[Path] = None) -> Record:
        origin = origin_path if origin_path is not None else current_directory()
        result = self.run(AddItem.from_words(words, origin), filters)
        return result.affected  # type: ignore[return-value]

    def delete(self, position: int, filters: Iterable[Path] = ()) -> Record:
        """Delete the item at 1-based ``position`` of the in-scope listing."""
        return self.run(DeleteItem(position), filters).affected  # type: ignore[return-value]

    def complete(self, position: int, filters: Iterable[Path] = ()) -> Record:
        """Mark the item at 1-based ``position`` of the in-scope listing as completed."""
        return self.run(CompleteItem(position), filters).affected  # type: ignore[return-value]


__all__ = ["CycleResult", "TodoManager"]
