from .record import DISPLAY_TIME_FORMAT, Record, local_now
from .errors import (
    TodoError,
    StorageAccessError,
    CorruptStoreError,
    PathResolutionError,
    IndexOutOfRangeError,
    EmptyMessageError,
)
from .paths import canonicalize_path, current_directory

__all__ = [
    "DISPLAY_TIME_FORMAT",
    "Record",
    "local_now",
    # Errors
    "TodoError",
    "StorageAccessError",
    "CorruptStoreError",
    "PathResolutionError",
    "IndexOutOfRangeError",
    "EmptyMessageError",
    # Paths
    "canonicalize_path",
    "current_directory",
]
