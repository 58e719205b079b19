"""Inference backend protocol: the contract every model backend implements."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from concierge_ai.models import TokenUsage


@dataclass
class InferenceResult:
    """Normalized result of a single model call."""

    content: str
    finish_reason: str = "finished"
    usage: TokenUsage = field(default_factory=TokenUsage)
    model: str = ""
    raw: Any = None

    @property
    def truncated(self) -> bool:
        return self.finish_reason == "max_output_reached"


@runtime_checkable
class IInferenceBackend(Protocol):
    """Protocol for pluggable inference backends."""

    async def infer(
        self,
        messages: list[dict[str, Any]],
        model: str,
        **params: Any,
    ) -> InferenceResult:
        """Run a single inference call.

        Args:
            messages: Chat messages in OpenAI format.
            model: Model identifier (supports LiteLLM prefixes).
            **params: Request parameters already shaped for the model family.

        Returns:
            InferenceResult with content, usage and the raw response.

        Raises:
            MalformedResponseError: If the response shape is not recognized.
        """
        ...
