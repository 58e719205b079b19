"""Reference-list check: every bullet must end with an allow-listed URL."""

from __future__ import annotations

from concierge_ai import contract
from concierge_ai.markdown import find_section, split_lines

_BULLET_PREFIXES = ("- ", "* ", "+ ")


def reference_bullets(markdown: str) -> list[str] | None:
    """Bullet lines of the references section, or ``None`` when the section is absent."""
    section = find_section(split_lines(markdown), contract.REFERENCES_HEADING)
    if section is None:
        return None
    return [line.strip() for line in section.body if line.strip().startswith(_BULLET_PREFIXES)]


def trailing_url(line: str) -> str:
    """Last whitespace-delimited token of ``line``, unwrapped from ``[..](..)``, ``(..)`` or ``<..>``."""
    parts = line.strip().split()
    if not parts:
        return ""
    token = parts[-1]
    if "](" in token:
        token = token.split("](", 1)[1]
    token = token.lstrip("(<").rstrip(".,;>")
    # DOIs may contain balanced parentheses; only an unmatched closer is wrapping.
    if token.endswith(")") and token.count(")") > token.count("("):
        token = token[:-1]
    return token.rstrip(".,;")


def is_allowed_citation(line: str) -> bool:
    return bool(contract.CITATION_URL_RE.fullmatch(trailing_url(line)))


def check_citations(markdown: str) -> bool:
    bullets = reference_bullets(markdown)
    if not bullets:
        return False
    return all(is_allowed_citation(bullet) for bullet in bullets)
