"""Deterministic salvage transforms for drafts that exhausted their retries.

Each transform is pure, documents when it is a no-op, and never invents
content beyond fixed sentinel text: names always come from the draft itself.
``salvage_draft`` composes them in a fixed order and is idempotent.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from concierge_ai import contract
from concierge_ai.markdown import (
    clean_name,
    entry_name,
    find_section,
    find_table,
    format_row,
    format_separator,
    join_lines,
    list_items,
    split_lines,
)
from concierge_ai.salvage.harvest import harvest_recommended_names
from concierge_ai.validation.checks.structure import has_terminator
from concierge_ai.validation.checks.tables import (
    check_blueprint_narrative,
    check_blueprint_table,
    check_recommended_table,
    is_dose_column,
)

if TYPE_CHECKING:
    from concierge_ai.core.config import GenerationConfig

log = logging.getLogger(__name__)

BLUEPRINT_COLUMNS = ["Rank", "Supplement", "Why It Matters"]
CONVERTED_COLUMNS = ["Supplement", "Dose & Timing", "Notes"]


def _cell(text: str) -> str:
    return text.replace("|", "/").strip()


# ── Blueprint ───────────────────────────────────────────────────────


def blueprint_block(names: list[str]) -> list[str]:
    """Lines of a complete blueprint section for ``names``."""
    lines = [contract.BLUEPRINT_HEADING, "", format_row(BLUEPRINT_COLUMNS), format_separator(len(BLUEPRINT_COLUMNS))]
    for rank, name in enumerate(names, start=1):
        lines.append(format_row([str(rank), _cell(name), contract.BLUEPRINT_RATIONALE]))
    lines.extend(["", contract.BLUEPRINT_NARRATIVE, ""])
    return lines


def rebuild_blueprint(
    markdown: str,
    *,
    min_rows: int = contract.MIN_BLUEPRINT_ROWS,
    banned_tokens: tuple[str, ...] = contract.BANNED_RATIONALE_TOKENS,
) -> str:
    """Repair the blueprint section from names found in the Recommended Stack.

    No-op when both blueprint checks already pass, or when the table is
    broken and fewer than ``min_rows`` names can be harvested. When only the
    narrative is missing, the fixed narrative is inserted after the existing
    table and the table is left alone.
    """
    table_ok = check_blueprint_table(markdown, min_rows=min_rows, banned_tokens=banned_tokens)
    narrative_ok = check_blueprint_narrative(markdown)
    if table_ok and narrative_ok:
        return markdown

    lines = split_lines(markdown)
    section = find_section(lines, contract.BLUEPRINT_HEADING)

    if table_ok and section is not None:
        table = find_table(section.body)
        assert table is not None  # table_ok implies a table
        at = section.body_start + table.end
        return join_lines(lines[:at] + ["", contract.BLUEPRINT_NARRATIVE, ""] + lines[at:])

    names = harvest_recommended_names(markdown)
    if len(names) < min_rows:
        log.info("Blueprint rebuild skipped: %d names harvested, %d required", len(names), min_rows)
        return markdown

    block = blueprint_block(names[:min_rows])
    if section is not None:
        return join_lines(lines[: section.start] + block + lines[section.end :])

    recommended = find_section(lines, contract.RECOMMENDED_HEADING)
    assert recommended is not None  # names were harvested from it
    return join_lines(lines[: recommended.start] + block + lines[recommended.start :])


# ── Recommended Stack ───────────────────────────────────────────────


def normalize_recommended_table(markdown: str, *, sentinel: str = contract.DOSE_SENTINEL) -> str:
    """Coerce the Recommended Stack into a well-formed table.

    No-op when the section is missing, already passes its check, or holds
    neither a table nor list entries. A table gets the sentinel in empty
    dose/timing cells and a separator row if it lacks one. A list becomes a
    ``Supplement | Dose & Timing | Notes`` table, one row per top-level entry
    (nested sub-entries go to its Notes cell), followed by the fixed
    synergy/timing sentence.
    """
    if check_recommended_table(markdown):
        return markdown

    lines = split_lines(markdown)
    section = find_section(lines, contract.RECOMMENDED_HEADING)
    if section is None:
        return markdown

    table = find_table(section.body)
    if table is not None:
        return join_lines(
            lines[: section.body_start + table.start]
            + _repaired_table(table.header, table.rows, sentinel)
            + lines[section.body_start + table.end :]
        )

    items = list_items(section.body)
    if not items:
        return markdown

    converted = [format_row(CONVERTED_COLUMNS), format_separator(len(CONVERTED_COLUMNS))]
    for item in items:
        name = entry_name(item.text) or item.text.strip()
        notes = _cell("; ".join(clean_name(child) for child in item.children))
        converted.append(f"| {_cell(name)} | {sentinel} | {notes} |" if notes else f"| {_cell(name)} | {sentinel} | |")
    converted.extend(["", contract.SYNERGY_NARRATIVE, ""])

    listed = {idx for item in items for idx in item.indexes}
    first = items[0].index
    body: list[str] = []
    for idx, line in enumerate(section.body):
        if idx == first:
            body.extend(converted)
        elif idx not in listed:
            body.append(line)
    return join_lines(lines[: section.body_start] + body + lines[section.end :])


def _repaired_table(header: list[str], rows: list[list[str]], sentinel: str) -> list[str]:
    width = len(header)
    dose_columns = {idx for idx, cell in enumerate(header) if is_dose_column(cell)}
    out = [format_row(header), format_separator(width)]
    for row in rows:
        cells = list(row[:width])
        if len(row) > width:
            cells[-1] = "; ".join(c for c in row[width - 1 :] if c)
        cells.extend([""] * (width - len(cells)))
        cells = [sentinel if idx in dose_columns and not cell else cell for idx, cell in enumerate(cells)]
        out.append(format_row(cells))
    return out


# ── Terminator ──────────────────────────────────────────────────────


def ensure_terminator(markdown: str) -> str:
    """Append the end marker. No-op when a marker line already exists."""
    if has_terminator(markdown):
        return markdown
    return markdown.rstrip() + "\n\n" + contract.TERMINATOR


# ── Composition ─────────────────────────────────────────────────────


def salvage_draft(markdown: str, *, config: GenerationConfig | None = None) -> str:
    """Run every repair in order: blueprint, recommended table, terminator."""
    if config is None:
        from concierge_ai.core.config import GenerationConfig

        config = GenerationConfig()

    repaired = rebuild_blueprint(
        markdown,
        min_rows=config.min_blueprint_rows,
        banned_tokens=tuple(config.banned_rationale_tokens),
    )
    repaired = normalize_recommended_table(repaired, sentinel=config.dose_sentinel)
    repaired = ensure_terminator(repaired)
    if repaired != markdown:
        log.info("Salvage rewrote draft (%d -> %d chars)", len(markdown), len(repaired))
    return repaired
