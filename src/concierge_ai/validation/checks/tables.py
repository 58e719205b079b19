"""Table checks: blueprint table, blueprint narrative, recommended-stack table."""

from __future__ import annotations

import re

from concierge_ai import contract
from concierge_ai.markdown import (
    Section,
    Table,
    count_sentences,
    find_section,
    find_table,
    is_label,
    paragraphs_after,
    split_lines,
)


def is_notes_column(header_cell: str) -> bool:
    return "note" in header_cell.lower()


def is_dose_column(header_cell: str) -> bool:
    text = header_cell.lower()
    return any(word in text for word in ("dose", "dosage", "timing", "when"))


def contains_banned_token(text: str, tokens: tuple[str, ...]) -> bool:
    """Case-insensitive placeholder detection; word tokens match on word boundaries."""
    lowered = text.lower()
    for token in tokens:
        token = token.lower()
        if re.fullmatch(r"[\w/ ]+", token):
            if re.search(rf"(?<![\w]){re.escape(token)}(?![\w])", lowered):
                return True
        elif token in lowered:
            return True
    return False


def section_table(markdown: str, heading: str) -> tuple[Section, Table] | tuple[Section, None] | None:
    """Return the section and its first table (``None`` when the section is missing)."""
    section = find_section(split_lines(markdown), heading)
    if section is None:
        return None
    return section, find_table(section.body)


def check_blueprint_table(
    markdown: str,
    *,
    min_rows: int = contract.MIN_BLUEPRINT_ROWS,
    banned_tokens: tuple[str, ...] = contract.BANNED_RATIONALE_TOKENS,
) -> bool:
    """Blueprint table exists with enough unique, non-placeholder rows."""
    found = section_table(markdown, contract.BLUEPRINT_HEADING)
    if found is None or found[1] is None:
        return False
    table = found[1]
    if not table.has_separator or len(table.rows) < min_rows or table.width < 2:
        return False

    name_idx = table.name_column
    rationale_idx = table.width - 1
    if rationale_idx == name_idx:
        return False

    seen: set[str] = set()
    for row in table.rows:
        name = table.column(row, name_idx).strip().lower()
        rationale = table.column(row, rationale_idx).strip()
        if not name or name in seen:
            return False
        if not rationale or contains_banned_token(rationale, banned_tokens):
            return False
        seen.add(name)
    return True


def check_blueprint_narrative(markdown: str, *, min_sentences: int = 2) -> bool:
    """A paragraph of at least ``min_sentences`` directly follows the blueprint table."""
    found = section_table(markdown, contract.BLUEPRINT_HEADING)
    if found is None or found[1] is None:
        return False
    section, table = found
    for paragraph in paragraphs_after(section.body, table.end):
        if is_label(paragraph):
            continue
        return count_sentences(paragraph) >= min_sentences
    return False


def check_recommended_table(markdown: str) -> bool:
    """Recommended-stack table is well-formed with no structurally empty cells.

    Only a ``Notes`` column may be left blank.
    """
    found = section_table(markdown, contract.RECOMMENDED_HEADING)
    if found is None or found[1] is None:
        return False
    table = found[1]
    if not table.has_separator or not table.rows:
        return False
    if any(not cell for cell in table.header):
        return False

    for row in table.rows:
        if len(row) != table.width:
            return False
        for header_cell, cell in zip(table.header, row):
            if not cell and not is_notes_column(header_cell):
                return False
    return True
