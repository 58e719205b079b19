"""Protocol for pluggable prompt backends."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class IPromptBackend(Protocol):
    """Interface for prompt storage backends.

    Implementations must be synchronous; prompts are resolved inline while
    composing a request.
    """

    def get(self, domain: str, category: str, name: str) -> str:
        """Retrieve a prompt template.

        Args:
            domain: Domain namespace (e.g. ``"report"``).
            category: Prompt category (e.g. ``"generation"``).
            name: Constant name (e.g. ``"REPORT_SYSTEM_PROMPT"``).

        Returns:
            The prompt template string.

        Raises:
            KeyError: If the prompt is not found.
        """
        ...
