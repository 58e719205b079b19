"""Response normalization over an explicit set of known response shapes.

Every raw model response is classified into exactly one shape:

- ``ChatCompletionShape``: ``choices[0].message.content``
- ``OutputTextShape``: a top-level ``output_text`` string
- ``OutputBlocksShape``: ``output[].content[].text`` blocks

Anything else raises :class:`MalformedResponseError`; there is no fallback
that stringifies an unknown payload.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from concierge_ai.exceptions import MalformedResponseError
from concierge_ai.inference.protocols import InferenceResult
from concierge_ai.models import TokenUsage


@dataclass(frozen=True)
class ChatCompletionShape:
    content: str
    finish_reason: str


@dataclass(frozen=True)
class OutputTextShape:
    content: str
    finish_reason: str


@dataclass(frozen=True)
class OutputBlocksShape:
    content: str
    finish_reason: str


ResponseShape = Union[ChatCompletionShape, OutputTextShape, OutputBlocksShape]


def _get(obj: Any, key: str) -> Any:
    """Read ``key`` from a mapping or an attribute-style response object."""
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(key)
    return getattr(obj, key, None)


def _map_finish_reason(reason: Any) -> str:
    if reason in ("length", "max_tokens", "max_output_tokens", "incomplete"):
        return "max_output_reached"
    return "finished"


def _as_list(value: Any) -> list[Any] | None:
    if isinstance(value, (list, tuple)):
        return list(value)
    return None


def _classify_chat(raw: Any) -> ChatCompletionShape | None:
    choices = _as_list(_get(raw, "choices"))
    if not choices:
        return None
    content = _get(_get(choices[0], "message"), "content")
    if not isinstance(content, str):
        return None
    return ChatCompletionShape(content=content, finish_reason=_map_finish_reason(_get(choices[0], "finish_reason")))


def _classify_output_text(raw: Any) -> OutputTextShape | None:
    text = _get(raw, "output_text")
    if not isinstance(text, str) or not text:
        return None
    return OutputTextShape(content=text, finish_reason=_map_finish_reason(_get(raw, "status")))


def _classify_output_blocks(raw: Any) -> OutputBlocksShape | None:
    output = _as_list(_get(raw, "output"))
    if not output:
        return None
    texts: list[str] = []
    for item in output:
        for block in _as_list(_get(item, "content")) or []:
            text = _get(block, "text")
            if isinstance(text, str):
                texts.append(text)
    if not texts:
        return None
    return OutputBlocksShape(content="".join(texts), finish_reason=_map_finish_reason(_get(raw, "status")))


def classify_response(raw: Any) -> ResponseShape:
    """Classify ``raw`` into one of the known response shapes.

    Raises:
        MalformedResponseError: If no known shape matches.
    """
    for classifier in (_classify_chat, _classify_output_text, _classify_output_blocks):
        shape = classifier(raw)
        if shape is not None:
            return shape
    raise MalformedResponseError(
        f"Unrecognized model response shape: {type(raw).__name__}",
        raw_response=raw,
    )


def _int(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    return 0


def extract_usage(raw: Any) -> TokenUsage:
    """Token counters from either chat-style or responses-style usage blocks."""
    usage = _get(raw, "usage")
    if usage is None:
        return TokenUsage()
    prompt = _int(_get(usage, "prompt_tokens")) or _int(_get(usage, "input_tokens"))
    completion = _int(_get(usage, "completion_tokens")) or _int(_get(usage, "output_tokens"))
    total = _int(_get(usage, "total_tokens")) or prompt + completion
    return TokenUsage(prompt_tokens=prompt, completion_tokens=completion, total_tokens=total)


def normalize_response(raw: Any, *, requested_model: str = "") -> InferenceResult:
    """Single entry point turning any supported raw response into an ``InferenceResult``."""
    shape = classify_response(raw)
    model = _get(raw, "model")
    return InferenceResult(
        content=shape.content,
        finish_reason=shape.finish_reason,
        usage=extract_usage(raw),
        model=model if isinstance(model, str) and model else requested_model,
        raw=raw,
    )
