"""Persistence backend protocol and the key scheme the stores share.

Every document is a JSON string stored under ``<kind>/<id>``:

- ``submissions/<submission_id>``: a normalized intake :class:`Submission`
- ``reports/<report_id>``: a :class:`FinalReport`, never overwritten
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from concierge_ai.exceptions import PersistenceError

SUBMISSIONS_PREFIX = "submissions/"
REPORTS_PREFIX = "reports/"


def normalize_key(key: str) -> str:
    """Canonical form of a storage key.

    Backslashes become ``/``; empty, ``.`` and ``..`` segments are dropped, so
    an id can never climb out of its kind. Raises ``PersistenceError`` when
    nothing is left.
    """
    parts = [p for p in key.replace("\\", "/").split("/") if p and p not in (".", "..")]
    if not parts:
        raise PersistenceError(f"Invalid storage key: {key!r}")
    return "/".join(parts)


@runtime_checkable
class IPersistenceBackend(Protocol):
    """Key/value store for JSON documents keyed by ``<kind>/<id>``."""

    def save(self, key: str, data: str) -> None:
        """Store ``data`` under ``key``, replacing any previous document."""
        ...

    def load(self, key: str) -> str:
        """Return the document under ``key``. Raises KeyError if absent."""
        ...

    def exists(self, key: str) -> bool:
        ...

    def delete(self, key: str) -> None:
        """Remove ``key``; a missing key is not an error."""
        ...

    def list_keys(self, prefix: str = "") -> list[str]:
        """Sorted normalized keys starting with ``prefix`` (e.g. ``reports/``)."""
        ...
