"""Single-mutation application over the in-scope subset.

Positions are 1-based and always refer to the in-scope listing of the
current invocation, never to the full store.
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence, Union

from core import EmptyMessageError, IndexOutOfRangeError, Record, local_now


@dataclass(frozen=True)
class AddItem:
    message: str
    origin_path: Path

    @classmethod
    def from_words(cls, words: Sequence[str], origin_path: Path) -> "AddItem":
        return cls(message=" ".join(words), origin_path=origin_path)


@dataclass(frozen=True)
class DeleteItem:
    position: int


@dataclass(frozen=True)
class CompleteItem:
    position: int


@dataclass(frozen=True)
class ListItems:
    pass


Mutation = Union[AddItem, DeleteItem, CompleteItem, ListItems]


def is_read_only(mutation: Mutation) -> bool:
    return isinstance(mutation, ListItems)


def check_position(position: int, size: int) -> int:
    """Validate a 1-based position against the in-scope size; return the 0-based index."""
    if position < 1 or position > size:
        raise IndexOutOfRangeError(position, size)
    return position - 1


def validate_message(message: str) -> str:
    if not (message or "").strip():
        raise EmptyMessageError()
    return message


def apply_mutation(selected: List[Record], mutation: Mutation, now: Optional[datetime] = None) -> List[Record]:
    """Apply ``mutation`` to ``selected`` in place and return it.

    Validation happens before any change, so a failed mutation leaves
    ``selected`` untouched.
    """
    if isinstance(mutation, ListItems):
        return selected
    if isinstance(mutation, AddItem):
        message = validate_message(mutation.message)
        selected.append(Record.new(message, mutation.origin_path, now=now or local_now()))
        return selected
    if isinstance(mutation, DeleteItem):
        idx = check_position(mutation.position, len(selected))
        del selected[idx]
        return selected
    if isinstance(mutation, CompleteItem):
        idx = check_position(mutation.position, len(selected))
        selected[idx].mark_completed(now)
        return selected
    raise TypeError(f"Unsupported mutation: {mutation!r}")


__all__ = [
    "AddItem",
    "DeleteItem",
    "CompleteItem",
    "ListItems",
    "Mutation",
    "is_read_only",
    "check_position",
    "validate_message",
    "apply_mutation",
]
