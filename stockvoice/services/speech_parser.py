"""Speech-to-inventory pipeline: transcript in, flagged stock lines out.

Works with or without separators, so "5 green onion, 3 edamame" and
"5 green onion 3 edamame" resolve the same way.

Malformed or unrecognized speech never raises; it just yields fewer lines.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Sequence

from ..config import get_settings
from ..schemas import CatalogItem
from .catalog_index import CatalogIndex, build_catalog_index
from .corrections import ResolvedLine, resolve_corrections
from .flags import FlaggedLine, apply_flags
from .matcher import match_phrase
from .normalizer import Quantity
from .segments import extract_segments

logger = logging.getLogger(__name__)


def parse_speech_to_lines(
    text: Optional[str],
    catalog: Sequence[CatalogItem],
    *,
    index: CatalogIndex | None = None,
) -> List[ResolvedLine]:
    if not text or not text.strip():
        return []
    segments = extract_segments(text)
    if not segments:
        return []
    catalog = list(catalog or [])
    if index is None:
        index = build_catalog_index(catalog)

    matches = []
    for segment in segments:
        item_id = match_phrase(segment.phrase, index, catalog)
        if item_id is None:
            continue
        matches.append((item_id, segment.quantity))

    lines = resolve_corrections(matches)
    logger.debug(
        "Parsed %s segments into %s lines (%s matched)",
        len(segments),
        len(lines),
        len(matches),
    )
    return lines


def parse_speech(
    text: Optional[str],
    catalog: Sequence[CatalogItem],
    overrides: Optional[Mapping[str, Any]] = None,
    *,
    default_low: Optional[Quantity] = None,
    index: CatalogIndex | None = None,
) -> List[FlaggedLine]:
    """Parse ``text`` and flag each line against per-item overrides."""
    if default_low is None:
        default_low = get_settings().default_low_threshold
    lines = parse_speech_to_lines(text, catalog, index=index)
    return apply_flags(lines, overrides, default_low=default_low)
