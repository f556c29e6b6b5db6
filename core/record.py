from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

DISPLAY_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def local_now() -> datetime:
    """Current local time, timezone-aware."""
    return datetime.now().astimezone()


@dataclass
class Record:
    created_at: datetime
    origin_path: Path
    message: str
    completed_at: Optional[datetime] = field(default=None)

    @classmethod
    def new(cls, message: str, origin_path: Path, now: Optional[datetime] = None) -> "Record":
        return cls(created_at=now or local_now(), origin_path=Path(origin_path), message=message)

    @property
    def completed(self) -> bool:
        return self.completed_at is not None

    def mark_completed(self, now: Optional[datetime] = None) -> None:
        # Re-completing refreshes the timestamp.
        self.completed_at = now or local_now()

    def display_line(self, position: int, time_format: str = DISPLAY_TIME_FORMAT) -> str:
        marker = "x" if self.completed else " "
        created = self.created_at.astimezone().strftime(time_format)
        return f"{position} [{marker}] {self.message} ({created})"

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation (keys match the on-disk todofile.json format)."""
        return {
            "timestamp": self.created_at.isoformat(),
            "path": str(self.origin_path),
            "message": self.message,
            "completed": self.completed_at.isoformat() if self.completed_at else None,
        }
