"""Model capability table.

Model families disagree on request shape: some reject a sampling
temperature, and newer ones renamed the output-token limit. Request
parameters are always built from this table.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class ModelCapabilities:
    accepts_temperature: bool
    max_tokens_param: str


MODEL_CAPABILITIES: dict[str, ModelCapabilities] = {
    "gpt-5-mini": ModelCapabilities(accepts_temperature=False, max_tokens_param="max_completion_tokens"),
    "gpt-5": ModelCapabilities(accepts_temperature=True, max_tokens_param="max_completion_tokens"),
    "gpt-4o": ModelCapabilities(accepts_temperature=True, max_tokens_param="max_tokens"),
    "gpt-4o-mini": ModelCapabilities(accepts_temperature=True, max_tokens_param="max_tokens"),
}

DEFAULT_CAPABILITIES = ModelCapabilities(accepts_temperature=False, max_tokens_param="max_tokens")


def model_capabilities(model: str) -> ModelCapabilities:
    """Capabilities for ``model``, matched by longest known prefix.

    A LiteLLM ``provider/`` prefix is ignored. Unknown models get the
    conservative default (no temperature, ``max_tokens``).
    """
    name = model.rsplit("/", 1)[-1].strip().lower()
    matches = [key for key in MODEL_CAPABILITIES if name.startswith(key)]
    if not matches:
        return DEFAULT_CAPABILITIES
    return MODEL_CAPABILITIES[max(matches, key=len)]


def build_request_params(
    model: str,
    *,
    temperature: Optional[float] = None,
    max_tokens: Optional[int] = None,
) -> dict[str, Any]:
    """Request parameters accepted by ``model``'s family."""
    caps = model_capabilities(model)
    params: dict[str, Any] = {}
    if temperature is not None and caps.accepts_temperature:
        params["temperature"] = temperature
    if max_tokens is not None:
        params[caps.max_tokens_param] = max_tokens
    return params
