"""Harvest supplement names from a draft's Recommended Stack section."""

from __future__ import annotations

from concierge_ai import contract
from concierge_ai.markdown import (
    clean_name,
    entry_name,
    find_section,
    is_separator,
    is_table_line,
    list_entry,
    list_items,
    name_column_index,
    split_lines,
    split_row,
)


def harvest_recommended_names(markdown: str) -> list[str]:
    """Names from table rows, bullets and numbered lines, in document order.

    Nested sub-bullets belong to the entry above them and are not names.
    De-duplicated by exact string equality; the first occurrence wins.
    Returns an empty list when the section is missing.
    """
    section = find_section(split_lines(markdown), contract.RECOMMENDED_HEADING)
    if section is None:
        return []

    nested = {idx for item in list_items(section.body) for idx in item.child_indexes}
    names: list[str] = []
    header: list[str] | None = None
    for idx, line in enumerate(section.body):
        if is_table_line(line):
            if is_separator(line):
                continue
            cells = split_row(line)
            if header is None:
                header = cells
                continue
            col = name_column_index(header)
            name = clean_name(cells[col]) if col < len(cells) else ""
        else:
            header = None
            entry = list_entry(line)
            if entry is None or idx in nested:
                continue
            name = entry_name(entry) or entry.strip()

        if name and name not in names:
            names.append(name)
    return names
