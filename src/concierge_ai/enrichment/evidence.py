"""Curated evidence index: supplement name -> PubMed/DOI citations."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Iterable, Mapping

from concierge_ai import contract

log = logging.getLogger(__name__)

# Common alias -> canonical curated key.
EVIDENCE_ALIASES: dict[str, str] = {
    "vitamin d": "vitamin d3 (cholecalciferol)",
    "vitamin d3": "vitamin d3 (cholecalciferol)",
    "cholecalciferol": "vitamin d3 (cholecalciferol)",
    "vitamin b12": "b12 (methylcobalamin)",
    "b12": "b12 (methylcobalamin)",
    "methylcobalamin": "b12 (methylcobalamin)",
    "b vitamins": "b-complex",
    "b complex": "b-complex",
    "omega 3": "omega-3 (epa+dha)",
    "epa dha": "omega-3 (epa+dha)",
    "fish oil": "omega-3 (epa+dha)",
    "coq10": "coq10 (ubiquinone)",
    "ubiquinol": "coq10 (ubiquinone)",
    "ashwagandha": "ashwagandha (ksm-66 or similar)",
    "rhodiola rosea": "rhodiola rosea (3% rosavins)",
    "bacopa monnieri": "bacopa monnieri (50% bacosides)",
    "zinc": "zinc (picolinate)",
    "zinc picolinate": "zinc (picolinate)",
    "magnesium": "magnesium (glycinate)",
    "magnesium glycinate": "magnesium (glycinate)",
    "magnesium bisglycinate": "magnesium (glycinate)",
    "magnesium citrate": "magnesium (glycinate)",
    "creatine": "creatine (monohydrate)",
    "creatine monohydrate": "creatine (monohydrate)",
    "turmeric": "curcumin (95% curcuminoids + piperine)",
    "curcumin": "curcumin (95% curcuminoids + piperine)",
    "probiotic": "probiotic (lacto/bifido blend)",
    "probiotics": "probiotic (lacto/bifido blend)",
    "psyllium": "fiber (psyllium husk)",
    "fiber": "fiber (psyllium husk)",
    "nac": "nac (n-acetylcysteine)",
    "whey protein": "protein (whey isolate)",
}

# Placeholder names that never get citations.
IGNORED_NAMES = frozenset({"see dosing notes", "see dosing & notes", "see dosing", "see notes", "-", "multivitamin"})


def key_of(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", " ", (name or "").lower()).strip()


_ALIASES_BY_KEY = {key_of(alias): canonical for alias, canonical in EVIDENCE_ALIASES.items()}


def canonical_evidence_name(name: str) -> str:
    """Map aliases like ``Fish Oil`` or ``OMEGA 3`` onto the curated key."""
    key = key_of(name)
    return _ALIASES_BY_KEY.get(key, key)


def sanitize_citations(urls: Iterable[str]) -> list[str]:
    """Keep only PubMed/DOI URLs, stripped, in their original order."""
    clean: list[str] = []
    for url in urls:
        url = (url or "").strip()
        if url and contract.CITATION_URL_RE.fullmatch(url) and url not in clean:
            clean.append(url)
    return clean


class EvidenceIndex:
    """Read-only lookup of curated citations per supplement."""

    def __init__(self, entries: Mapping[str, list[Any]] | None = None) -> None:
        self._index: dict[str, list[str]] = {}
        for name, items in (entries or {}).items():
            urls = [item["url"] if isinstance(item, Mapping) else str(item) for item in items]
            self._index[key_of(name)] = sanitize_citations(urls)

    @classmethod
    def from_json(cls, path: Path) -> EvidenceIndex:
        """Load ``{"name": [{"url": ...}, ...]}`` from disk."""
        data = json.loads(path.read_text(encoding="utf-8"))
        log.info("Loaded evidence index with %d entries from %s", len(data), path)
        return cls(data)

    def __len__(self) -> int:
        return len(self._index)

    def lookup(self, name: str, limit: int = 2) -> list[str]:
        """Top ``limit`` citations for ``name``; empty when nothing is curated."""
        if not name or name.strip().lower() in IGNORED_NAMES:
            return []
        canonical = key_of(canonical_evidence_name(name))
        urls = self._index.get(canonical) or self._index.get(key_of(name))
        if not urls and canonical:
            soft = next((key for key in self._index if canonical in key), None)
            urls = self._index[soft] if soft else []
        return list((urls or [])[:limit])
