"""Fake inference backend for testing."""

from __future__ import annotations

from typing import Any, Union

from concierge_ai.inference.protocols import InferenceResult
from concierge_ai.models import TokenUsage

Scripted = Union[InferenceResult, Exception, str]


def fake_usage(total: int = 150) -> TokenUsage:
    return TokenUsage(prompt_tokens=total // 3, completion_tokens=total - total // 3, total_tokens=total)


class FakeInferenceBackend:
    """Replays a script of results, raw drafts, or exceptions. No LLM calls.

    The last scripted entry repeats once the script is exhausted.
    """

    def __init__(self, script: list[Scripted] | None = None, *, model: str = "fake-model") -> None:
        self._script = list(script or ["fake response"])
        self._model = model
        self.calls: list[dict[str, Any]] = []

    async def infer(
        self,
        messages: list[dict[str, Any]],
        model: str,
        **params: Any,
    ) -> InferenceResult:
        self.calls.append({"messages": messages, "model": model, "params": params})
        index = min(len(self.calls) - 1, len(self._script) - 1)
        item = self._script[index]
        if isinstance(item, Exception):
            raise item
        if isinstance(item, str):
            return InferenceResult(content=item, usage=fake_usage(), model=model or self._model)
        return item


class StatusError(Exception):
    """Transport error carrying an HTTP status code."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"HTTP {status_code}")
        self.status_code = status_code
