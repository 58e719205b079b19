"""Salvage engine: deterministic repairs for drafts that failed validation."""

from __future__ import annotations

from concierge_ai.salvage.harvest import harvest_recommended_names
from concierge_ai.salvage.repairs import (
    ensure_terminator,
    normalize_recommended_table,
    rebuild_blueprint,
    salvage_draft,
)

__all__ = [
    "ensure_terminator",
    "harvest_recommended_names",
    "normalize_recommended_table",
    "rebuild_blueprint",
    "salvage_draft",
]
