from __future__ import annotations

import yaml
from pathlib import Path
from typing import Dict, Any

from core import DISPLAY_TIME_FORMAT

USER_CONFIG_PATH = Path.home() / ".scoped_todo_config.yaml"


def _load_config() -> Dict[str, Any]:
    if not USER_CONFIG_PATH.exists():
        return {}
    try:
        data = yaml.safe_load(USER_CONFIG_PATH.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError):
        return {}
    return data if isinstance(data, dict) else {}


def get_user_store_dir() -> str:
    return str(_load_config().get("store_dir", "") or "").strip()


def get_user_time_format() -> str:
    value = str(_load_config().get("time_format", "") or "").strip()
    return value or DISPLAY_TIME_FORMAT
