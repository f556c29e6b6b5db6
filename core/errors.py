"""Error taxonomy for the path-scoped record store.

Every error aborts the invocation before anything is written back.
"""


class TodoError(Exception):
    """Base class; ``code`` is the stable token used in structured output."""

    code = "ERROR"


class StorageAccessError(TodoError):
    code = "STORAGE_ACCESS"


class CorruptStoreError(TodoError):
    code = "CORRUPT_STORE"


class PathResolutionError(TodoError):
    code = "PATH_RESOLUTION"


class IndexOutOfRangeError(TodoError):
    code = "INDEX_OUT_OF_RANGE"

    def __init__(self, position: int, size: int):
        self.position = position
        self.size = size
        if size:
            detail = f"expected 1..{size}"
        else:
            detail = "no items in scope"
        super().__init__(f"Position {position} is out of range ({detail})")


class EmptyMessageError(TodoError):
    code = "EMPTY_MESSAGE"

    def __init__(self, message: str = "Cannot add an item with an empty message"):
        super().__init__(message)
