"""Async model client: capability-aware requests with transport retry.

This is the transport retry layer only. It retries timeouts, connection
failures, rate limits and 5xx responses with exponential backoff; content
quality is never inspected here.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Any, Optional

from concierge_ai.core.config import LLMConfig
from concierge_ai.exceptions import LLMClientError, NonRetryableError, RetryableError
from concierge_ai.inference.capabilities import build_request_params
from concierge_ai.inference.protocols import IInferenceBackend, InferenceResult

log = logging.getLogger(__name__)


class LLMClient:
    """Sends a system/user prompt pair through an inference backend."""

    def __init__(self, backend: IInferenceBackend, config: LLMConfig | None = None) -> None:
        self._backend = backend
        self._config = config or LLMConfig()

    @property
    def model(self) -> str:
        return self._config.model

    @staticmethod
    def _is_retryable(exc: Exception) -> bool:
        """Classify whether a transport error should be retried.

        Retryable: timeouts, connection errors, HTTP 429 and 5xx.
        Everything else (auth, bad request, not found, unknown) fails fast.
        """
        from litellm.exceptions import (
            APIConnectionError,
            InternalServerError,
            RateLimitError,
            ServiceUnavailableError,
            Timeout,
        )

        # Timeout carries a 408 status, so it must be checked before status codes.
        if isinstance(exc, (asyncio.TimeoutError, TimeoutError, Timeout, ConnectionError)):
            return True
        if isinstance(exc, (APIConnectionError, RateLimitError, ServiceUnavailableError, InternalServerError)):
            return True

        status = getattr(exc, "status_code", None)
        if isinstance(status, int):
            return status == 429 or status >= 500
        return False

    def _backoff(self, attempt: int) -> float:
        cfg = self._config
        base_wait = min(cfg.retry_base_delay * (2**attempt), cfg.retry_max_delay)
        jitter = random.uniform(0, base_wait * cfg.retry_jitter_factor) if base_wait > 0 else 0.0
        return base_wait + jitter

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> InferenceResult:
        """Single completion bounded by ``timeout`` per call.

        Raises:
            NonRetryableError: On a non-transient failure or malformed response.
            RetryableError: When every transport attempt failed transiently.
        """
        effective_model = model or self._config.model
        effective_timeout = timeout if timeout is not None else self._config.timeout
        messages: list[dict[str, Any]] = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]
        params = build_request_params(
            effective_model,
            temperature=self._config.temperature,
            max_tokens=self._config.max_tokens,
        )

        max_retries = self._config.max_retries
        last_error: Exception | None = None
        for attempt in range(max_retries):
            try:
                return await asyncio.wait_for(
                    self._backend.infer(messages, effective_model, **params),
                    timeout=effective_timeout,
                )
            except LLMClientError:
                raise
            except Exception as e:
                last_error = e
                if not self._is_retryable(e):
                    raise NonRetryableError(f"Non-retryable LLM error: {e!r}") from e

                wait = self._backoff(attempt)
                log.warning(
                    "LLM retry %d/%d on %s: %r (wait=%.1fs)",
                    attempt + 1,
                    max_retries,
                    effective_model,
                    e,
                    wait,
                )
                if attempt < max_retries - 1 and wait > 0:
                    await asyncio.sleep(wait)

        raise RetryableError(f"LLM call failed after {max_retries} attempts: {last_error!r}") from last_error
