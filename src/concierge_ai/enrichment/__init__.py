"""Enrichment stage: affiliate links and curated citations."""

from __future__ import annotations

from concierge_ai.enrichment.affiliate import (
    CatalogEntry,
    CatalogLinkResolver,
    IAffiliateLinkResolver,
    build_amazon_search_link,
    choose_link,
    normalize_supplement_name,
    rewrite_marketplace_links,
    tag_amazon_url,
)
from concierge_ai.enrichment.enricher import Enricher, shopping_labels, supplement_names
from concierge_ai.enrichment.evidence import EvidenceIndex, canonical_evidence_name, sanitize_citations

__all__ = [
    "CatalogEntry",
    "CatalogLinkResolver",
    "Enricher",
    "EvidenceIndex",
    "IAffiliateLinkResolver",
    "build_amazon_search_link",
    "canonical_evidence_name",
    "choose_link",
    "normalize_supplement_name",
    "rewrite_marketplace_links",
    "sanitize_citations",
    "shopping_labels",
    "supplement_names",
    "tag_amazon_url",
]
