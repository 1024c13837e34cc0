"""Load catalog and location-override snapshots from JSON files.

The catalog file is either a list of item records or an object with an
``items`` list. Overrides map item id to ``{"lowThreshold": n}`` or a bare
number.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping

from pydantic import ValidationError

from ..schemas import CatalogItem, LocationOverride

logger = logging.getLogger(__name__)

_catalog_lock = threading.Lock()
_catalog_cache: List[CatalogItem] | None = None
_catalog_cache_path: str | None = None
_catalog_cache_mtime: float = 0.0


class CatalogStoreError(RuntimeError):
    """A catalog or overrides file could not be read."""


def _read_json(path: Path) -> Any:
    try:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except FileNotFoundError as exc:
        raise CatalogStoreError(f"File not found at {path}") from exc
    except (OSError, json.JSONDecodeError) as exc:
        raise CatalogStoreError(f"Unable to read {path}: {exc}") from exc


def catalog_from_records(records: Iterable[Any]) -> List[CatalogItem]:
    items: List[CatalogItem] = []
    for position, record in enumerate(records):
        if not isinstance(record, Mapping):
            logger.warning("Skipping catalog record %s: not an object", position)
            continue
        try:
            items.append(CatalogItem.model_validate(dict(record)))
        except ValidationError as exc:
            logger.warning(
                "Skipping catalog record %s (%s): %s",
                position,
                record.get("id"),
                exc.errors()[0].get("msg"),
            )
    return items


def load_catalog(path: str | os.PathLike[str], *, use_cache: bool = True) -> List[CatalogItem]:
    """Read a catalog snapshot, reusing the parsed items until the file changes."""
    global _catalog_cache, _catalog_cache_path, _catalog_cache_mtime
    catalog_path = Path(path)
    try:
        mtime = catalog_path.stat().st_mtime
    except FileNotFoundError as exc:
        raise CatalogStoreError(f"Catalog file not found at {catalog_path}") from exc

    with _catalog_lock:
        if (
            use_cache
            and _catalog_cache is not None
            and _catalog_cache_path == str(catalog_path)
            and _catalog_cache_mtime == mtime
        ):
            return list(_catalog_cache)

        payload = _read_json(catalog_path)
        records = payload if isinstance(payload, list) else None
        if records is None and isinstance(payload, dict):
            records = payload.get("items")
        if not isinstance(records, list):
            raise CatalogStoreError(f"Catalog {catalog_path} has no item list")

        items = catalog_from_records(records)
        logger.info("Loaded %s catalog items from %s", len(items), catalog_path)
        if use_cache:
            _catalog_cache = items
            _catalog_cache_path = str(catalog_path)
            _catalog_cache_mtime = mtime
        return list(items)


def reset_catalog_cache() -> None:
    global _catalog_cache, _catalog_cache_path, _catalog_cache_mtime
    with _catalog_lock:
        _catalog_cache = None
        _catalog_cache_path = None
        _catalog_cache_mtime = 0.0


def overrides_from_mapping(raw: Mapping[str, Any] | None) -> Dict[str, LocationOverride]:
    """Keep only entries that carry a finite numeric ``lowThreshold``."""
    overrides: Dict[str, LocationOverride] = {}
    for item_id, entry in (raw or {}).items():
        value = entry.get("lowThreshold") if isinstance(entry, Mapping) else entry
        try:
            overrides[str(item_id)] = LocationOverride(lowThreshold=value)
        except ValidationError:
            logger.debug("Ignoring override for %s: %r", item_id, entry)
    return overrides


def load_location_overrides(path: str | os.PathLike[str]) -> Dict[str, LocationOverride]:
    payload = _read_json(Path(path))
    if not isinstance(payload, dict):
        raise CatalogStoreError(f"Overrides file {path} must contain an object")
    overrides = overrides_from_mapping(payload)
    logger.info("Loaded %s location overrides from %s", len(overrides), path)
    return overrides
