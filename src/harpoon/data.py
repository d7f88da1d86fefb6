"""Persistent store for encoded lists, partitioned by project key.

Layout (FileMedium):
    ~/.local/share/harpoon/
    └── <sha256(project key)>.json     # {"<list name>": ["<encoded item>", ...], ...}

Each project key is loaded lazily on first access and kept in memory. Writes
only touch memory; ``sync()`` flushes every project key that changed.
"""

from __future__ import annotations

import hashlib
import json
import logging
from pathlib import Path
from typing import Iterable, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


class PersistenceError(OSError):
    """One or more project keys could not be written to the backing medium."""

    def __init__(self, failures: dict[str, Exception]) -> None:
        self.failures = failures
        keys = ", ".join(sorted(failures))
        super().__init__(f"Failed to persist {len(failures)} project key(s): {keys}")


@runtime_checkable
class Medium(Protocol):
    """Where the store's bytes live."""

    def read(self, key: str) -> bytes | None: ...

    def write(self, key: str, payload: bytes) -> None: ...


class FileMedium:
    """One JSON file per project key, named by the key's SHA-256 digest."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def path_for(self, key: str) -> Path:
        return self.root / f"{hashlib.sha256(key.encode('utf-8')).hexdigest()}.json"

    def read(self, key: str) -> bytes | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def write(self, key: str, payload: bytes) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        self.path_for(key).write_bytes(payload)


class MemoryMedium:
    """Keeps payloads in a dict. Useful for tests and throwaway sessions."""

    def __init__(self) -> None:
        self.files: dict[str, bytes] = {}

    def read(self, key: str) -> bytes | None:
        return self.files.get(key)

    def write(self, key: str, payload: bytes) -> None:
        self.files[key] = payload


class Store:
    """Read/write access to encoded lists keyed by (project key, list name)."""

    def __init__(self, medium: Medium) -> None:
        self.medium = medium
        self._data: dict[str, dict[str, list[str]]] = {}
        self._dirty: set[str] = set()

    def _load(self, key: str) -> dict[str, list[str]]:
        """Read a project key from the medium once; later calls hit memory."""
        if key in self._data:
            return self._data[key]

        lists: dict[str, list[str]] = {}
        raw = self.medium.read(key)
        if raw:
            try:
                decoded = json.loads(raw.decode("utf-8"))
            except (UnicodeDecodeError, json.JSONDecodeError) as e:
                logger.warning("Ignoring unreadable data for %s: %s", key, e)
                decoded = {}
            if isinstance(decoded, dict):
                lists = {
                    name: list(values)
                    for name, values in decoded.items()
                    if isinstance(values, list)
                }
            else:
                logger.warning("Ignoring data for %s: not a JSON object", key)

        self._data[key] = lists
        return lists

    def data(self, key: str, name: str) -> list[str]:
        """Encoded entries for ``name`` under ``key``; empty if nothing is stored."""
        return list(self._load(key).get(name, []))

    def update(self, key: str, name: str, values: Iterable[str]) -> None:
        """Replace the stored entries for ``name`` under ``key``."""
        self._load(key)[name] = list(values)
        self._dirty.add(key)

    def sync(self) -> None:
        """Write every changed project key to the medium.

        Each key is attempted independently. Keys that fail stay dirty and are
        reported together in a ``PersistenceError``.
        """
        failures: dict[str, Exception] = {}
        for key in sorted(self._dirty):
            payload = json.dumps(self._data.get(key, {})).encode("utf-8")
            try:
                self.medium.write(key, payload)
            except OSError as e:
                logger.error("Failed to persist %s: %s", key, e)
                failures[key] = e
            else:
                logger.debug("Persisted %s (%d bytes)", key, len(payload))

        self._dirty = set(failures)
        if failures:
            raise PersistenceError(failures)

    def pending(self) -> dict[str, dict[str, list[str]]]:
        """Project keys changed since the last successful sync, with their lists."""
        return {key: dict(self._data[key]) for key in self._dirty if key in self._data}

    def info(self) -> dict[str, str]:
        root = getattr(self.medium, "root", None)
        return {"data_path": str(root) if root is not None else ""}

    def dump(self) -> dict[str, dict[str, list[str]]]:
        return self._data
