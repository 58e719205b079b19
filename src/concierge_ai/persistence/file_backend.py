"""File-based persistence backend: one JSON file per key under a base directory."""

from __future__ import annotations

import logging
from pathlib import Path

from concierge_ai.exceptions import PersistenceError
from concierge_ai.persistence.protocols import normalize_key

log = logging.getLogger(__name__)


class FilePersistenceBackend:
    """Stores documents as ``<base>/<key>.json``; key segments become directories."""

    def __init__(self, base_path: Path) -> None:
        self._base = Path(base_path)
        self._base.mkdir(parents=True, exist_ok=True)

    def _key_path(self, key: str) -> Path:
        parts = normalize_key(key).split("/")
        return self._base.joinpath(*parts[:-1], parts[-1] + ".json")

    def save(self, key: str, data: str) -> None:
        path = self._key_path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp = path.with_name(path.name + ".tmp")
            tmp.write_text(data, encoding="utf-8")
            tmp.replace(path)
        except OSError as e:
            raise PersistenceError(f"Failed to save {key}: {e}") from e
        log.debug("Saved %s to %s", key, path)

    def load(self, key: str) -> str:
        path = self._key_path(key)
        if not path.is_file():
            raise KeyError(f"Not found: {key} (path: {path})")
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"Failed to load {key}: {e}") from e

    def exists(self, key: str) -> bool:
        return self._key_path(key).is_file()

    def delete(self, key: str) -> None:
        path = self._key_path(key)
        if path.is_file():
            path.unlink()

    def list_keys(self, prefix: str = "") -> list[str]:
        keys = []
        for path in self._base.rglob("*.json"):
            key = path.relative_to(self._base).as_posix()[: -len(".json")]
            if key.startswith(prefix):
                keys.append(key)
        return sorted(keys)
