import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from config import get_user_store_dir

STORE_FILENAME = "todofile.json"
LOCK_SUFFIX = ".lock"

# Keep the same qualifier/organization/application triple as earlier releases
# so existing stores are found.
APP_QUALIFIER = "io.github"
APP_ORGANIZATION = "logvp"
APP_NAME = "todoapp"


@dataclass(frozen=True)
class StoreLocation:
    directory: Path
    filename: str = STORE_FILENAME

    @property
    def path(self) -> Path:
        return self.directory / self.filename

    @property
    def lock_path(self) -> Path:
        return self.directory / f".{self.filename}{LOCK_SUFFIX}"


def platform_data_dir() -> Path:
    """Per-user local data directory for the current platform."""
    home = Path.home()
    if sys.platform == "win32":
        base = os.environ.get("LOCALAPPDATA")
        root = Path(base) if base else home / "AppData" / "Local"
        return root / APP_ORGANIZATION / APP_NAME / "data"
    if sys.platform == "darwin":
        return home / "Library" / "Application Support" / f"{APP_QUALIFIER}.{APP_ORGANIZATION}.{APP_NAME}"
    xdg = os.environ.get("XDG_DATA_HOME")
    root = Path(xdg) if xdg and Path(xdg).is_absolute() else home / ".local" / "share"
    return root / APP_NAME


def resolve_store_location(store_dir: Optional[str] = None) -> StoreLocation:
    """Unified resolver for the store location.

    Priority:
    1. Explicit store_dir (``--store-dir``).
    2. SCOPED_TODO_STORE_DIR env variable (for tests).
    3. ``store_dir`` from the user config file.
    4. Platform data directory.

    Nothing is created here; the codec creates the directory on first use.
    """
    if store_dir:
        return StoreLocation(Path(store_dir).expanduser().absolute())

    env_dir = os.environ.get("SCOPED_TODO_STORE_DIR")
    if env_dir:
        return StoreLocation(Path(env_dir).expanduser().absolute())

    configured = get_user_store_dir()
    if configured:
        return StoreLocation(Path(configured).expanduser().absolute())

    return StoreLocation(platform_data_dir())


__all__ = ["STORE_FILENAME", "StoreLocation", "platform_data_dir", "resolve_store_location"]
