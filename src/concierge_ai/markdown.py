"""Line-oriented markdown helpers shared by validators, salvage, and enrichment.

Everything here is pure and tolerant: malformed input yields ``None`` or an
empty result, never an exception.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

_HEADING_RE = re.compile(r"^\s*#{1,2}\s+\S")
_SEPARATOR_RE = re.compile(r"^\|?\s*:?-+:?\s*(\|\s*:?-+:?\s*)*\|?$")
_BULLET_RE = re.compile(r"^\s*[-*+]\s+(.*\S)\s*$")
_NUMBERED_RE = re.compile(r"^\s*\d+[.)]\s+(.*\S)\s*$")
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+(?:\s+|$)")
_NAME_SPLIT_RE = re.compile(r"\s*(?::|\s[—–-]\s|—|–|\()")
_LEADING_PAREN_RE = re.compile(r"^(?:\([^)]*\)\s*)+")
_EMPHASIS_RE = re.compile(r"[*_`]")
_LINK_RE = re.compile(r"\[([^\]]+)\]\([^)]*\)")

# Header cells that hold an ordinal rather than the item name.
_ORDINAL_HEADERS = frozenset({"rank", "#", "no", "no.", "order", "priority"})


@dataclass(frozen=True)
class Section:
    """A level-2 section: heading line plus body up to the next heading."""

    heading: str
    start: int
    end: int
    body: list[str] = field(default_factory=list)

    @property
    def body_start(self) -> int:
        return self.start + 1


@dataclass(frozen=True)
class Table:
    """A pipe table located at ``lines[start:end]`` of the scanned block."""

    start: int
    end: int
    header: list[str]
    rows: list[list[str]]
    has_separator: bool

    @property
    def width(self) -> int:
        return len(self.header)

    @property
    def name_column(self) -> int:
        return name_column_index(self.header)

    def column(self, row: list[str], idx: int) -> str:
        return row[idx] if idx < len(row) else ""


@dataclass
class ListItem:
    """A top-level list entry plus the more deeply indented entries under it."""

    index: int
    text: str
    children: list[str] = field(default_factory=list)
    child_indexes: list[int] = field(default_factory=list)

    @property
    def indexes(self) -> list[int]:
        return [self.index, *self.child_indexes]


# ── Lines and sections ───────────────────────────────────────────────


def split_lines(markdown: str) -> list[str]:
    return markdown.replace("\r\n", "\n").split("\n")


def join_lines(lines: list[str]) -> str:
    return "\n".join(lines)


def is_heading(line: str) -> bool:
    return bool(_HEADING_RE.match(line))


def heading_matches(line: str, heading: str) -> bool:
    """Case-insensitive match of a ``## Title`` line, tolerating trailing text."""
    title = heading.lstrip("#").strip().lower()
    stripped = line.strip()
    if not stripped.startswith("#"):
        return False
    text = stripped.lstrip("#").strip().lower()
    return text == title or text.startswith(title + " ") or text.startswith(title + ":")


def find_section(lines: list[str], heading: str) -> Section | None:
    """Return the first section whose heading matches, or ``None``."""
    for idx, line in enumerate(lines):
        if heading_matches(line, heading):
            end = idx + 1
            while end < len(lines) and not is_heading(lines[end]):
                end += 1
            return Section(heading=line, start=idx, end=end, body=lines[idx + 1 : end])
    return None


# ── Tables ───────────────────────────────────────────────────────────


def is_table_line(line: str) -> bool:
    return line.strip().startswith("|")


def is_separator(line: str) -> bool:
    stripped = line.strip()
    return "-" in stripped and bool(_SEPARATOR_RE.match(stripped))


def split_row(line: str) -> list[str]:
    """Split a pipe-table row into stripped cells."""
    stripped = line.strip()
    if stripped.startswith("|"):
        stripped = stripped[1:]
    if stripped.endswith("|"):
        stripped = stripped[:-1]
    return [cell.strip() for cell in stripped.split("|")]


def format_row(cells: list[str]) -> str:
    return "| " + " | ".join(cells) + " |"


def format_separator(width: int) -> str:
    return "|" + "|".join(["---"] * width) + "|"


def name_column_index(header: list[str]) -> int:
    """Index of the first column that is not a rank/ordinal column."""
    for idx, cell in enumerate(header):
        if cell.strip().lower() not in _ORDINAL_HEADERS:
            return idx
    return 0


def find_table(lines: list[str]) -> Table | None:
    """Locate the first contiguous block of pipe-table lines."""
    start = next((i for i, line in enumerate(lines) if is_table_line(line)), None)
    if start is None:
        return None
    end = start
    while end < len(lines) and is_table_line(lines[end]):
        end += 1

    block = lines[start:end]
    header = split_row(block[0])
    has_separator = len(block) > 1 and is_separator(block[1])
    rows = [split_row(line) for line in block[1:] if not is_separator(line)]
    return Table(start=start, end=end, header=header, rows=rows, has_separator=has_separator)


# ── Lists and prose ──────────────────────────────────────────────────


def list_entry(line: str) -> str | None:
    """Return the text of a dash/asterisk bullet or numbered line, else ``None``."""
    if is_table_line(line):
        return None
    match = _BULLET_RE.match(line) or _NUMBERED_RE.match(line)
    return match.group(1) if match else None


def clean_name(raw: str) -> str:
    """Strip markdown decoration from a cell or list entry."""
    text = _LINK_RE.sub(r"\1", raw)
    text = _EMPHASIS_RE.sub("", text)
    return re.sub(r"\s+", " ", text).strip()


def entry_name(text: str) -> str:
    """Item name from a list entry such as ``**Magnesium** — 200 mg at night``.

    A leading parenthetical such as ``(Optional)`` is skipped. Only empty
    when the entry has no text left after removing markdown decoration.
    """
    cleaned = clean_name(text)
    body = _LEADING_PAREN_RE.sub("", cleaned) or cleaned
    head = _NAME_SPLIT_RE.split(body, maxsplit=1)[0].strip(" -–—.,;:")
    return head or body.strip(" -–—.,;:()") or cleaned


def list_items(lines: list[str]) -> list[ListItem]:
    """Group list entries into top-level items with their nested sub-entries.

    An entry indented deeper than the current top-level entry is its child.
    Blank lines keep the grouping; any other non-list line ends it.
    """
    items: list[ListItem] = []
    base: int | None = None
    for idx, line in enumerate(lines):
        text = list_entry(line)
        if text is None:
            if line.strip():
                base = None
            continue
        expanded = line.expandtabs(4)
        indent = len(expanded) - len(expanded.lstrip())
        if base is not None and indent > base:
            items[-1].children.append(text)
            items[-1].child_indexes.append(idx)
        else:
            items.append(ListItem(index=idx, text=text))
            base = indent
    return items


def count_sentences(text: str) -> int:
    parts = _SENTENCE_SPLIT_RE.split(text.strip())
    return sum(1 for part in parts if re.search(r"[A-Za-z0-9]", part))


def paragraphs_after(lines: list[str], start: int) -> list[str]:
    """Prose paragraphs from ``start`` up to the next heading, table, or list."""
    paragraphs: list[str] = []
    current: list[str] = []
    for line in lines[start:]:
        if is_heading(line) or is_table_line(line) or list_entry(line) is not None:
            break
        if line.strip():
            current.append(line.strip())
        elif current:
            paragraphs.append(" ".join(current))
            current = []
    if current:
        paragraphs.append(" ".join(current))
    return paragraphs


def is_label(paragraph: str) -> bool:
    """``**Analysis**``-style labels carry no sentence of their own."""
    text = clean_name(paragraph).rstrip(":")
    return not re.search(r"[.!?]", text) and len(text.split()) <= 3
