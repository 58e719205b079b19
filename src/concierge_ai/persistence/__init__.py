"""Pluggable key/value persistence backends for submissions and reports."""

from __future__ import annotations

from typing import TYPE_CHECKING

from concierge_ai.persistence.file_backend import FilePersistenceBackend
from concierge_ai.persistence.memory_backend import MemoryPersistenceBackend
from concierge_ai.persistence.protocols import (
    REPORTS_PREFIX,
    SUBMISSIONS_PREFIX,
    IPersistenceBackend,
    normalize_key,
)

if TYPE_CHECKING:
    from concierge_ai.core.config import PersistenceConfig


def create_persistence_backend(config: PersistenceConfig) -> IPersistenceBackend:
    """Build the backend named by ``config.backend``."""
    if config.backend == "memory":
        return MemoryPersistenceBackend()
    return FilePersistenceBackend(config.store_path)


__all__ = [
    "FilePersistenceBackend",
    "IPersistenceBackend",
    "MemoryPersistenceBackend",
    "REPORTS_PREFIX",
    "SUBMISSIONS_PREFIX",
    "create_persistence_backend",
    "normalize_key",
]
