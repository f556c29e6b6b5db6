from typing import ContextManager, List, Protocol

from core import Record


class RecordStore(Protocol):
    def load(self) -> List[Record]:
        ...

    def save(self, records: List[Record]) -> None:
        ...

    def lock(self) -> ContextManager[None]:
        ...
