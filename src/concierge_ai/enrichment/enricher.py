"""Post-validation enrichment: affiliate tagging, shopping links, citations.

Runs on accepted, salvaged and annotated documents alike. Every step only
adds what is missing, so enriching an enriched document changes nothing.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from concierge_ai import contract
from concierge_ai.enrichment.affiliate import IAffiliateLinkResolver, rewrite_marketplace_links
from concierge_ai.enrichment.evidence import EvidenceIndex
from concierge_ai.markdown import (
    clean_name,
    entry_name,
    find_section,
    find_table,
    heading_matches,
    join_lines,
    list_entry,
    split_lines,
)
from concierge_ai.models import AffiliatePreferences
from concierge_ai.salvage.harvest import harvest_recommended_names

if TYPE_CHECKING:
    from concierge_ai.core.config import EnrichmentConfig
    from concierge_ai.models import Submission

log = logging.getLogger(__name__)

_LINK_LABEL_RE = re.compile(r"^\[([^\]]+)\]\(")


def supplement_names(markdown: str) -> list[str]:
    """Blueprint and Recommended Stack names, case-insensitively unique."""
    names: list[str] = []
    section = find_section(split_lines(markdown), contract.BLUEPRINT_HEADING)
    table = find_table(section.body) if section is not None else None
    if table is not None:
        names.extend(clean_name(table.column(row, table.name_column)) for row in table.rows)
    names.extend(harvest_recommended_names(markdown))

    seen: set[str] = set()
    unique: list[str] = []
    for name in names:
        key = name.lower()
        if name and key not in seen and key != contract.DOSE_SENTINEL.lower():
            seen.add(key)
            unique.append(name)
    return unique


def shopping_labels(lines: list[str]) -> set[str]:
    """Lower-cased item labels of the list entries in ``lines``.

    ``- [Magnesium Glycinate](url)`` and ``- Magnesium Glycinate: url`` both
    label ``magnesium glycinate``.
    """
    labels: set[str] = set()
    for line in lines:
        text = list_entry(line)
        if text is None:
            continue
        match = _LINK_LABEL_RE.match(text.lstrip("*_ "))
        label = clean_name(match.group(1)) if match else entry_name(text)
        if label:
            labels.add(label.lower())
    return labels


def append_to_section(markdown: str, heading: str, new_lines: list[str], *, before: str) -> str:
    """Append ``new_lines`` to the end of ``heading``'s section.

    A missing section is created right before the ``before`` heading, or
    before the terminator, or at the end of the document.
    """
    if not new_lines:
        return markdown
    lines = split_lines(markdown)
    section = find_section(lines, heading)
    if section is not None:
        end = section.end
        while end > section.body_start and not lines[end - 1].strip():
            end -= 1
        return join_lines(lines[:end] + new_lines + [""] + lines[end:])

    at = next((i for i, line in enumerate(lines) if heading_matches(line, before)), None)
    if at is None:
        at = next((i for i, line in enumerate(lines) if line.strip() == contract.TERMINATOR), len(lines))
    block = [heading, ""] + new_lines + [""]
    return join_lines(lines[:at] + block + lines[at:])


class Enricher:
    """Attaches purchase links and curated citations to a finished report."""

    def __init__(
        self,
        resolver: IAffiliateLinkResolver,
        evidence: EvidenceIndex | None = None,
        config: EnrichmentConfig | None = None,
    ) -> None:
        if config is None:
            from concierge_ai.core.config import EnrichmentConfig

            config = EnrichmentConfig()
        self._resolver = resolver
        self._evidence = evidence or EvidenceIndex()
        self._config = config

    def attach_shopping_links(self, markdown: str, names: list[str], preferences: AffiliatePreferences) -> str:
        section = find_section(split_lines(markdown), contract.SHOPPING_HEADING)
        existing = shopping_labels(section.body) if section is not None else set()
        new_lines: list[str] = []
        for name in names:
            if name.lower() in existing:
                continue
            link = self._resolver.resolve(name, preferences)
            if link:
                new_lines.append(f"- [{name}]({link})")
        if new_lines:
            log.debug("Attaching %d shopping links", len(new_lines))
        return append_to_section(markdown, contract.SHOPPING_HEADING, new_lines, before=contract.FOLLOW_UP_HEADING)

    def attach_citations(self, markdown: str, names: list[str]) -> str:
        new_lines: list[str] = []
        added: set[str] = set()
        for name in names:
            for url in self._evidence.lookup(name, limit=self._config.citations_per_item):
                if url not in markdown and url not in added:
                    added.add(url)
                    new_lines.append(f"- {name}: {url}")
        if new_lines:
            log.debug("Attaching %d curated citations", len(new_lines))
        return append_to_section(markdown, contract.REFERENCES_HEADING, new_lines, before=contract.SHOPPING_HEADING)

    def enrich(self, markdown: str, submission: Submission) -> str:
        """Run every enrichment step in order. Idempotent."""
        enriched = rewrite_marketplace_links(markdown, self._config.amazon_tag)
        names = supplement_names(enriched)
        if self._config.attach_shopping_links:
            enriched = self.attach_shopping_links(enriched, names, AffiliatePreferences.from_submission(submission))
        if self._config.attach_citations:
            enriched = self.attach_citations(enriched, names)
        return enriched
