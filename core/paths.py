from os import PathLike
from pathlib import Path
from typing import Union

from .errors import PathResolutionError


def canonicalize_path(raw: Union[str, PathLike]) -> Path:
    """Absolute path with symlinks resolved; the path must exist."""
    try:
        return Path(raw).expanduser().resolve(strict=True)
    except (OSError, RuntimeError) as exc:
        raise PathResolutionError(f"Cannot resolve path '{raw}': {exc}") from exc


def current_directory() -> Path:
    try:
        cwd = Path.cwd()
    except OSError as exc:
        raise PathResolutionError(f"Cannot resolve current directory: {exc}") from exc
    return canonicalize_path(cwd)


__all__ = ["canonicalize_path", "current_directory"]
