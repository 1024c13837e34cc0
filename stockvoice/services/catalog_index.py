"""Lookup from canonical item names and synonyms to catalog item ids."""

from __future__ import annotations

import hashlib
import json
import logging
import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from ..schemas import CatalogItem
from .normalizer import compact_form, normalize_text
from .segments import strip_fillers
from .singularize import singularize_phrase

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogIndex:
    entries: Mapping[str, str]
    fingerprint: str

    def lookup(self, key: str) -> Optional[str]:
        """Resolve ``key`` as-is, then in its compact form."""
        if not key:
            return None
        item_id = self.entries.get(key)
        if item_id is not None:
            return item_id
        compact = compact_form(key)
        if compact:
            return self.entries.get(compact)
        return None

    def __len__(self) -> int:
        return len(self.entries)


def canonical_keys(term: str) -> List[str]:
    """Every index key a catalog term contributes, most specific first."""
    normalized = normalize_text(term)
    if not normalized:
        return []
    # Spoken phrases lose their filler words, so names such as "Coke No Sugar"
    # also need a key without them.
    stripped = " ".join(strip_fillers(normalized.split()))
    forms = [normalized, singularize_phrase(normalized)]
    if stripped and stripped != normalized:
        forms.extend([stripped, singularize_phrase(stripped)])
    keys: List[str] = []
    for form in forms:
        for key in (form, compact_form(form)):
            if key and key not in keys:
                keys.append(key)
    return keys


def catalog_fingerprint(catalog: Sequence[CatalogItem]) -> str:
    payload = [[item.id, item.name, list(item.synonyms)] for item in catalog]
    digest = hashlib.sha1(json.dumps(payload, ensure_ascii=False).encode("utf-8"))
    return digest.hexdigest()


def build_catalog_index(catalog: Sequence[CatalogItem]) -> CatalogIndex:
    """Build a fresh, read-only index for ``catalog``.

    Names are registered before synonyms. A synonym never replaces another
    item's name key; other collisions are last-registered-wins in catalog
    order.
    """
    entries: Dict[str, str] = {}
    name_keys: Dict[str, str] = {}

    for item in catalog:
        for key in canonical_keys(item.display_name):
            previous = entries.get(key)
            if previous is not None and previous != item.id:
                logger.warning(
                    "Catalog name key %r for %s replaces %s", key, item.id, previous
                )
            entries[key] = item.id
            name_keys[key] = item.id

    for item in catalog:
        for synonym in item.synonyms:
            for key in canonical_keys(synonym):
                owner = name_keys.get(key)
                if owner is not None and owner != item.id:
                    logger.warning(
                        "Synonym %r of %s collides with the name of %s; skipped",
                        synonym,
                        item.id,
                        owner,
                    )
                    continue
                previous = entries.get(key)
                if previous is not None and previous != item.id and owner is None:
                    logger.debug(
                        "Synonym key %r for %s replaces %s", key, item.id, previous
                    )
                entries[key] = item.id

    return CatalogIndex(
        entries=MappingProxyType(entries),
        fingerprint=catalog_fingerprint(catalog),
    )


class CatalogIndexCache:
    """Hold one index and rebuild it whenever the catalog changes."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._index: CatalogIndex | None = None

    def get(self, catalog: Sequence[CatalogItem]) -> CatalogIndex:
        fingerprint = catalog_fingerprint(catalog)
        with self._lock:
            if self._index is None or self._index.fingerprint != fingerprint:
                self._index = build_catalog_index(catalog)
                logger.info(
                    "Built catalog index with %s keys for %s items",
                    len(self._index),
                    len(catalog),
                )
            return self._index

    def clear(self) -> None:
        with self._lock:
            self._index = None


def iter_item_terms(item: CatalogItem) -> Iterable[str]:
    yield item.display_name
    yield from item.synonyms
