"""Real-time inference backend: wraps litellm.acompletion()."""

from __future__ import annotations

import logging
from typing import Any, Optional

from concierge_ai.inference.normalize import normalize_response
from concierge_ai.inference.protocols import InferenceResult

log = logging.getLogger(__name__)


class RealTimeBackend:
    """Single-call inference via litellm.acompletion().

    The raw response is passed through :func:`normalize_response`, so an
    unrecognized payload surfaces as ``MalformedResponseError``.
    """

    def __init__(self, *, api_key: Optional[str] = None, api_base: Optional[str] = None) -> None:
        self._api_key = api_key
        self._api_base = api_base

    async def infer(
        self,
        messages: list[dict[str, Any]],
        model: str,
        **params: Any,
    ) -> InferenceResult:
        from litellm import acompletion

        kwargs: dict[str, Any] = {
            "model": model,
            "messages": messages,
            **params,
        }
        if self._api_key:
            kwargs["api_key"] = self._api_key
        if self._api_base:
            kwargs["api_base"] = self._api_base

        response = await acompletion(**kwargs)
        result = normalize_response(response, requested_model=model)
        log.debug(
            "Model %s returned %d chars (finish=%s, tokens=%d)",
            result.model,
            len(result.content),
            result.finish_reason,
            result.usage.total_tokens,
        )
        return result
