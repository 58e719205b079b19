"""File-based prompt backend backed by template modules on disk.

Each template module stores its prompts in a ``_PROMPT_DATA`` dict. This backend
reads from that dict directly, bypassing module ``__getattr__`` (which delegates
back to the registry).
"""

from __future__ import annotations

import importlib
from typing import Any


class FilePromptBackend:
    """Loads prompts from Python modules via importlib.

    Module path convention: ``concierge_ai.prompts.templates.{domain}.{category}``
    """

    def __init__(self, package: str = "concierge_ai.prompts.templates") -> None:
        self._package = package
        self._modules: dict[tuple[str, str], Any] = {}

    def get(self, domain: str, category: str, name: str) -> str:
        key = (domain, category)
        if key not in self._modules:
            module_path = f"{self._package}.{domain}.{category}"
            try:
                self._modules[key] = importlib.import_module(module_path)
            except ModuleNotFoundError as exc:
                raise KeyError(f"Prompt module not found: {module_path}") from exc

        data: dict[str, str] | None = getattr(self._modules[key], "_PROMPT_DATA", None)
        if data is not None and name in data:
            return data[name]

        raise KeyError(f"Prompt {name!r} not found in {domain}/{category}")
