"""Resolve a candidate phrase to a catalog item id."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence, Set

from ..schemas import CatalogItem
from .catalog_index import CatalogIndex, iter_item_terms
from .normalizer import normalize_text
from .segments import strip_fillers
from .singularize import plural_variants, singularize_phrase

logger = logging.getLogger(__name__)


def _phrase_variants(normalized: str) -> Set[str]:
    singular = singularize_phrase(normalized)
    variants = {normalized, singular}
    tokens = singular.split()
    if tokens:
        head = " ".join(tokens[:-1])
        for plural in plural_variants(tokens[-1]):
            variants.add(f"{head} {plural}".strip())
    return variants


def _item_forms(item: CatalogItem) -> Set[str]:
    forms: Set[str] = set()
    for term in iter_item_terms(item):
        normalized = normalize_text(term)
        if not normalized:
            continue
        stripped = " ".join(strip_fillers(normalized.split()))
        for form in (normalized, stripped):
            if form:
                forms.add(form)
                forms.add(singularize_phrase(form))
    return forms


def scan_catalog(phrase: str, catalog: Iterable[CatalogItem]) -> Optional[str]:
    """Equality-only fallback over item names and synonyms."""
    normalized = normalize_text(phrase)
    if not normalized:
        return None
    variants = _phrase_variants(normalized)
    for item in catalog:
        if variants & _item_forms(item):
            return item.id
    return None


def match_phrase(
    phrase: str,
    index: CatalogIndex,
    catalog: Sequence[CatalogItem],
) -> Optional[str]:
    """Longest leading token window that names a catalog item wins.

    "green onion bunch" tries "green onion bunch", then "green onion", then
    "green"; trailing noise never blocks a match and windows are compared by
    equality, so "onion" never matches "green onion".
    """
    canonical = singularize_phrase(normalize_text(phrase))
    tokens: List[str] = canonical.split()
    if not tokens:
        return None
    for end in range(len(tokens), 0, -1):
        item_id = index.lookup(" ".join(tokens[:end]))
        if item_id is not None:
            return item_id
    item_id = scan_catalog(phrase, catalog)
    if item_id is None:
        logger.debug("No catalog match for phrase %r", phrase)
    return item_id
