"""Path helpers."""

from __future__ import annotations

import os
from pathlib import Path


def normalize_path(path: str | os.PathLike[str], root: str | os.PathLike[str]) -> str:
    """Return ``path`` relative to ``root`` when it lies inside it, else absolute."""
    if not str(path):
        return ""
    root_path = Path(root).expanduser().resolve()
    p = Path(path).expanduser()
    if not p.is_absolute():
        p = root_path / p
    p = p.resolve()
    try:
        return p.relative_to(root_path).as_posix()
    except ValueError:
        return p.as_posix()
