"""Document-level checks: word count and terminator marker."""

from __future__ import annotations

import re

from concierge_ai import contract

_TERMINATOR_RE = re.compile(rf"^[ \t]*{re.escape(contract.TERMINATOR)}[ \t]*$", re.MULTILINE)


def word_count(markdown: str) -> int:
    return len(markdown.split())


def check_word_count(markdown: str, *, min_words: int = contract.MIN_WORDS) -> bool:
    """True when the whitespace-delimited token count reaches ``min_words``."""
    return word_count(markdown) >= min_words


def has_terminator(markdown: str) -> bool:
    return bool(_TERMINATOR_RE.search(markdown))


def check_terminator(markdown: str) -> bool:
    """True when a line holds exactly the end-of-document marker.

    A missing marker is how truncated completions are detected.
    """
    return has_terminator(markdown)
