"""Pluggable inference layer.

Usage::

    from concierge_ai.inference import LLMClient, RealTimeBackend
    client = LLMClient(RealTimeBackend(), settings.llm)
    result = await client.complete(system_prompt, user_prompt)
"""

from __future__ import annotations

from concierge_ai.inference.capabilities import (
    MODEL_CAPABILITIES,
    ModelCapabilities,
    build_request_params,
    model_capabilities,
)
from concierge_ai.inference.client import LLMClient
from concierge_ai.inference.normalize import classify_response, normalize_response
from concierge_ai.inference.protocols import IInferenceBackend, InferenceResult
from concierge_ai.inference.realtime import RealTimeBackend

__all__ = [
    "IInferenceBackend",
    "InferenceResult",
    "LLMClient",
    "MODEL_CAPABILITIES",
    "ModelCapabilities",
    "RealTimeBackend",
    "build_request_params",
    "classify_response",
    "model_capabilities",
    "normalize_response",
]
