"""Affiliate links: marketplace tagging, catalog lookup and search fallback.

Premium members get the partner dispensary link when one exists. Everyone
else gets the curated link matching their brand preference
(``budget``/``trusted``/``clean``, else ``default``). With nothing curated,
the resolver falls back to a tagged Amazon search URL.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable
from urllib.parse import parse_qsl, quote_plus, urlsplit, urlunsplit

from pydantic import BaseModel, TypeAdapter

from concierge_ai.models import AffiliatePreferences

log = logging.getLogger(__name__)

_AMAZON_URL_RE = re.compile(r"https?://(?:www\.|smile\.)?amazon\.com/[^\s)\]>\"']*", re.IGNORECASE)
_DOSE_TOKEN_RE = re.compile(r"(\d+(?:\.\d+)?\s?(?:mg|mcg|iu|g))\b", re.IGNORECASE)

_CANONICAL_PREFIXES: tuple[tuple[str, str], ...] = (
    ("omega", "Omega-3"),
    ("vitamin d", "Vitamin D"),
    ("mag", "Magnesium"),
    ("ashwa", "Ashwagandha"),
    ("bacopa", "Bacopa Monnieri"),
    ("coq", "CoQ10"),
    ("rhodiola", "Rhodiola Rosea"),
    ("ginkgo", "Ginkgo Biloba"),
    ("zinc", "Zinc"),
)


def normalize_supplement_name(name: str) -> str:
    """Canonical display name used for catalog lookups."""
    collapsed = re.sub(r"\s+", " ", re.sub(r"[.*_`#]", "", (name or "").lower())).strip()
    if collapsed == "l":
        return "L-Theanine"
    if collapsed == "b" or "b complex" in collapsed or "b-vitamins" in collapsed:
        return "B-Vitamins"
    for prefix, canonical in _CANONICAL_PREFIXES:
        if collapsed.startswith(prefix):
            return canonical
    if re.match(r"acetyl[\s-]*l\b", collapsed) or "acetyl l carnitine" in collapsed:
        return "Acetyl-L-carnitine"
    return (name or "").strip()


# ── Marketplace URLs ────────────────────────────────────────────────


def tag_amazon_url(url: str, tag: str) -> str:
    """Add the associates ``tag`` parameter unless the URL already carries one."""
    parts = urlsplit(url)
    if any(key == "tag" for key, _ in parse_qsl(parts.query, keep_blank_values=True)):
        return url
    query = f"{parts.query}&tag={quote_plus(tag)}" if parts.query else f"tag={quote_plus(tag)}"
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def rewrite_marketplace_links(markdown: str, tag: str) -> str:
    """Tag every untracked Amazon URL in ``markdown``. Idempotent."""
    return _AMAZON_URL_RE.sub(lambda m: tag_amazon_url(m.group(0), tag), markdown)


def build_amazon_search_link(name: str, tag: str, dose: Optional[str] = None) -> str:
    """Health & Household search URL for ``name``, tagged for the associates program."""
    parts = [name.strip()] if name and name.strip() else []
    match = _DOSE_TOKEN_RE.search(dose or "")
    if match:
        parts.append(match.group(1).lower())
    parts.append("supplement")
    query = re.sub(r"\s+", " ", " ".join(parts)).strip()
    return f"https://www.amazon.com/s?k={quote_plus(query)}&i=hpc&tag={quote_plus(tag)}"


# ── Catalog resolver ────────────────────────────────────────────────


class CatalogEntry(BaseModel):
    """Curated product links for one ingredient."""

    ingredient: str
    product_name: Optional[str] = None
    link_budget: Optional[str] = None
    link_trusted: Optional[str] = None
    link_clean: Optional[str] = None
    link_default: Optional[str] = None
    link_partner: Optional[str] = None


def choose_link(entry: CatalogEntry, preferences: AffiliatePreferences) -> Optional[str]:
    if preferences.is_premium and entry.link_partner:
        return entry.link_partner
    pref = (preferences.brand_pref or "").strip().lower()
    preferred = {
        "budget": entry.link_budget,
        "trusted": entry.link_trusted,
        "clean": entry.link_clean,
    }.get(pref)
    return preferred or entry.link_default


@runtime_checkable
class IAffiliateLinkResolver(Protocol):
    """Maps a supplement name to a purchase URL, or ``None`` when unavailable."""

    def resolve(self, item_name: str, preferences: AffiliatePreferences) -> Optional[str]: ...


class CatalogLinkResolver:
    """Resolves purchase links from an in-memory product catalog."""

    def __init__(self, catalog: list[CatalogEntry] | None = None, *, amazon_tag: str) -> None:
        self._catalog = list(catalog or [])
        self._amazon_tag = amazon_tag

    @classmethod
    def from_json(cls, path: Path, *, amazon_tag: str) -> CatalogLinkResolver:
        """Load a catalog from a JSON array of :class:`CatalogEntry` objects."""
        entries = TypeAdapter(list[CatalogEntry]).validate_python(json.loads(path.read_text(encoding="utf-8")))
        log.info("Loaded %d catalog entries from %s", len(entries), path)
        return cls(entries, amazon_tag=amazon_tag)

    def find(self, name: str) -> Optional[CatalogEntry]:
        """Exact ingredient match, then fuzzy ingredient, then fuzzy product name."""
        needle = normalize_supplement_name(name).lower()
        if not needle:
            return None
        for entry in self._catalog:
            if entry.ingredient.lower() == needle:
                return entry
        for entry in self._catalog:
            if needle in entry.ingredient.lower():
                return entry
        for entry in self._catalog:
            if entry.product_name and needle in entry.product_name.lower():
                return entry
        return None

    def resolve(self, item_name: str, preferences: AffiliatePreferences) -> Optional[str]:
        canonical = normalize_supplement_name(item_name)
        if not canonical:
            return None
        entry = self.find(canonical)
        link = choose_link(entry, preferences) if entry is not None else None
        if link is None:
            link = build_amazon_search_link(canonical, self._amazon_tag)
        return tag_amazon_url(link, self._amazon_tag) if _AMAZON_URL_RE.fullmatch(link) else link
