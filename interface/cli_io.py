import json
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from core import Record


def iso_timestamp() -> str:
    """UTC timestamp for structured CLI output."""
    return datetime.now(timezone.utc).isoformat()


def structured_response(
    command: str,
    *,
    status: str = "OK",
    message: str = "",
    payload: Optional[Dict] = None,
    exit_code: int = 0,
) -> int:
    """Unified JSON response for --json mode."""
    body: Dict[str, object] = {
        "command": command,
        "status": status,
        "message": message,
        "timestamp": iso_timestamp(),
        "payload": payload or {},
    }
    print(json.dumps(body, ensure_ascii=False, indent=2))
    return exit_code


def structured_error(command: str, message: str, *, payload: Optional[Dict] = None, status: str = "ERROR") -> int:
    """Short-hand for structured error responses."""
    return structured_response(command, status=status, message=message, payload=payload, exit_code=1)


def plain_error(message: str) -> int:
    print(f"Error: {message}", file=sys.stderr)
    return 1


def record_to_dict(record: Record, position: Optional[int] = None) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    if position is not None:
        data["position"] = position
    data.update(
        {
            "message": record.message,
            "path": str(record.origin_path),
            "created_at": record.created_at.isoformat(),
            "completed_at": record.completed_at.isoformat() if record.completed_at else None,
            "completed": record.completed,
        }
    )
    return data


__all__ = ["iso_timestamp", "structured_response", "structured_error", "plain_error", "record_to_dict"]
