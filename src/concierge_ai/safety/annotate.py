"""Render safety warnings into the report's contraindications section."""

from __future__ import annotations

from concierge_ai import contract
from concierge_ai.enrichment.enricher import append_to_section
from concierge_ai.models import SafetyWarning

_SEVERITY_LABEL = {"info": "Note", "warning": "Caution", "danger": "Warning"}


def warning_line(warning: SafetyWarning) -> str:
    line = f"- **{_SEVERITY_LABEL[warning.severity]}:** {warning.message}"
    if warning.recommendation:
        line += f" {warning.recommendation}"
    return line


def apply_safety_warnings(markdown: str, warnings: list[SafetyWarning]) -> str:
    """Append each warning not already present. Idempotent."""
    new_lines: list[str] = []
    for warning in warnings:
        line = warning_line(warning)
        if line not in markdown and line not in new_lines:
            new_lines.append(line)
    return append_to_section(markdown, contract.CONTRAINDICATIONS_HEADING, new_lines, before="## Current Stack")
