"""JSON-file codec for the record collection.

The whole collection lives in one file (``todofile.json``) as a single-line
JSON array. Writes go through a temp file + ``os.replace`` so a failed save
never leaves a truncated store behind.
"""

from __future__ import annotations

import json
import logging
import os
import stat
import tempfile
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional

from core import CorruptStoreError, Record, StorageAccessError
from application.ports import RecordStore
from infrastructure.store_location import StoreLocation

try:  # POSIX advisory locking
    import fcntl  # type: ignore
except ModuleNotFoundError:  # pragma: no cover - non-POSIX platforms run unlocked
    fcntl = None  # type: ignore

logger = logging.getLogger("scoped_todo.store")

Echo = Callable[[str], None]

_REQUIRED_KEYS = ("timestamp", "path", "message", "completed")


def _parse_timestamp(value: Any, field_name: str, index: int) -> datetime:
    if not isinstance(value, str):
        raise CorruptStoreError(f"Item {index}: '{field_name}' must be a timestamp string")
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as exc:
        raise CorruptStoreError(f"Item {index}: invalid '{field_name}' timestamp {value!r}") from exc
    if parsed.tzinfo is None:
        raise CorruptStoreError(f"Item {index}: '{field_name}' timestamp has no UTC offset")
    return parsed


def record_from_dict(data: Any, index: int = 0) -> Record:
    if not isinstance(data, dict):
        raise CorruptStoreError(f"Item {index}: expected an object, got {type(data).__name__}")
    missing = [key for key in _REQUIRED_KEYS if key not in data]
    if missing:
        raise CorruptStoreError(f"Item {index}: missing keys {', '.join(missing)}")

    path = data["path"]
    if not isinstance(path, str) or not Path(path).is_absolute():
        raise CorruptStoreError(f"Item {index}: 'path' must be an absolute path string")
    message = data["message"]
    if not isinstance(message, str):
        raise CorruptStoreError(f"Item {index}: 'message' must be a string")
    completed = data["completed"]

    return Record(
        created_at=_parse_timestamp(data["timestamp"], "timestamp", index),
        origin_path=Path(path),
        message=message,
        completed_at=None if completed is None else _parse_timestamp(completed, "completed", index),
    )


def decode_records(text: str) -> List[Record]:
    """Parse store text; blank text is an empty collection."""
    if not text.strip():
        return []
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise CorruptStoreError(f"Todo list is not valid JSON: {exc}") from exc
    if not isinstance(payload, list):
        raise CorruptStoreError(f"Todo list must be a JSON array, got {type(payload).__name__}")
    return [record_from_dict(item, idx) for idx, item in enumerate(payload)]


def encode_records(records: List[Record]) -> str:
    items: List[Dict[str, Any]] = [record.to_dict() for record in records]
    return json.dumps(items, ensure_ascii=False, separators=(",", ":")) + "\n"


class JsonRecordStore(RecordStore):
    def __init__(self, location: StoreLocation, echo: Optional[Echo] = None):
        self.location = location
        self._echo = echo

    @property
    def path(self) -> Path:
        return self.location.path

    def ensure_directory(self) -> None:
        try:
            self.location.directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageAccessError(f"Cannot create storage directory {self.location.directory}: {exc}") from exc

    def read_raw(self) -> Optional[str]:
        """Raw store text, or None when the file does not exist yet."""
        self.ensure_directory()
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as exc:
            raise CorruptStoreError(f"Todo list {self.path} is not UTF-8 text: {exc}") from exc
        except OSError as exc:
            raise StorageAccessError(f"Cannot read {self.path}: {exc}") from exc

    def load(self) -> List[Record]:
        raw = self.read_raw()
        if raw is None:
            if self._echo:
                self._echo("No todo list file found")
            logger.debug("store %s missing, starting empty", self.path)
            return []
        if self._echo:
            self._echo(raw.rstrip("\n"))
        records = decode_records(raw)
        logger.debug("loaded %d records from %s", len(records), self.path)
        return records

    def save(self, records: List[Record]) -> None:
        content = encode_records(records)
        self.ensure_directory()
        target = self.path
        tmp_path: Path | None = None
        try:
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                delete=False,
                dir=str(self.location.directory),
                prefix=f".{self.location.filename}.",
                suffix=".tmp",
            ) as tmp:
                tmp_path = Path(tmp.name)
                tmp.write(content)
                tmp.flush()
                os.fsync(tmp.fileno())
            # Temp files are created 0600; keep the existing store's mode across the replace.
            if target.exists():
                os.chmod(tmp_path, stat.S_IMODE(target.stat().st_mode))
            os.replace(str(tmp_path), str(target))
        except OSError as exc:
            raise StorageAccessError(f"Cannot write {target}: {exc}") from exc
        finally:
            if tmp_path is not None and tmp_path.exists():
                try:
                    tmp_path.unlink()
                except OSError:
                    logger.warning("Could not remove temporary file %s", tmp_path)
        logger.debug("saved %d records to %s", len(records), target)

    @contextmanager
    def lock(self) -> Iterator[None]:
        """Exclusive advisory lock around a load-mutate-save cycle."""
        if fcntl is None:  # pragma: no cover
            yield
            return
        self.ensure_directory()
        try:
            lock_file = open(self.location.lock_path, "a", encoding="utf-8")
        except OSError as exc:
            raise StorageAccessError(f"Cannot open lock file {self.location.lock_path}: {exc}") from exc
        with lock_file:
            fcntl.flock(lock_file, fcntl.LOCK_EX)  # type: ignore[attr-defined]
            logger.debug("acquired lock %s", self.location.lock_path)
            try:
                yield
            finally:
                fcntl.flock(lock_file, fcntl.LOCK_UN)  # type: ignore[attr-defined]


__all__ = ["JsonRecordStore", "decode_records", "encode_records", "record_from_dict"]
