"""In-memory persistence backend for tests and single-process local runs."""

from __future__ import annotations

import logging

from concierge_ai.persistence.protocols import normalize_key

log = logging.getLogger(__name__)


class MemoryPersistenceBackend:
    """Documents live in a dict keyed by normalized ``<kind>/<id>``.

    Keys are normalized exactly as the file backend does, so ids that work
    in tests work on disk.
    """

    def __init__(self) -> None:
        self._documents: dict[str, str] = {}

    def save(self, key: str, data: str) -> None:
        key = normalize_key(key)
        self._documents[key] = data
        log.debug("Stored %s (%d bytes) in memory", key, len(data))

    def load(self, key: str) -> str:
        try:
            return self._documents[normalize_key(key)]
        except KeyError:
            raise KeyError(f"No document stored under {key!r}") from None

    def exists(self, key: str) -> bool:
        return normalize_key(key) in self._documents

    def delete(self, key: str) -> None:
        self._documents.pop(normalize_key(key), None)

    def list_keys(self, prefix: str = "") -> list[str]:
        return sorted(key for key in self._documents if key.startswith(prefix))
