"""Interaction rule sources consulted by the safety evaluator."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

from pydantic import TypeAdapter

from concierge_ai.safety.rules import InteractionRule

log = logging.getLogger(__name__)

_RULES_ADAPTER = TypeAdapter(list[InteractionRule])


@runtime_checkable
class IInteractionRulesSource(Protocol):
    """Loads the full interaction rule table. May fail; callers fall back."""

    async def load(self) -> list[InteractionRule]: ...


class MemoryRulesSource:
    """Fixed in-memory rule table."""

    def __init__(self, rules: list[InteractionRule] | None = None) -> None:
        self._rules = list(rules or [])

    async def load(self) -> list[InteractionRule]:
        return list(self._rules)


class JsonFileRulesSource:
    """Reads rules from a JSON array on disk on every load, off the event loop."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    async def load(self) -> list[InteractionRule]:
        raw = await asyncio.to_thread(self._path.read_text, encoding="utf-8")
        rules = _RULES_ADAPTER.validate_python(json.loads(raw))
        log.debug("Loaded %d interaction rules from %s", len(rules), self._path)
        return rules
