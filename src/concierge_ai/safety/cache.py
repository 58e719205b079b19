"""TTL cache for the interaction rule table.

The only shared mutable state across report generations. Owned by the
evaluator; TTL and clock are injected so expiry is testable.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Optional

from concierge_ai.safety.rules import InteractionRule
from concierge_ai.safety.sources import IInteractionRulesSource

log = logging.getLogger(__name__)


class InteractionRulesCache:
    """Caches ``source.load()`` for ``ttl_seconds``."""

    def __init__(
        self,
        source: IInteractionRulesSource,
        *,
        ttl_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._source = source
        self._ttl = ttl_seconds
        self._clock = clock
        self._rules: Optional[list[InteractionRule]] = None
        self._loaded_at = 0.0
        self._lock = asyncio.Lock()

    @property
    def is_fresh(self) -> bool:
        return self._rules is not None and (self._clock() - self._loaded_at) <= self._ttl

    async def get(self) -> list[InteractionRule]:
        """Cached rules, reloading from the source once the TTL has elapsed.

        Source errors propagate; the previous table is kept for the next call.
        """
        if self.is_fresh:
            assert self._rules is not None
            return self._rules
        async with self._lock:
            if not self.is_fresh:
                rules = await self._source.load()
                self._rules = rules
                self._loaded_at = self._clock()
                log.info("Interaction rules refreshed (%d rules)", len(rules))
            assert self._rules is not None
            return self._rules

    def invalidate(self) -> None:
        self._rules = None
        self._loaded_at = 0.0
