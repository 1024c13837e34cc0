"""Summarize what a transcript resolved to and which words were not understood."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Set

from ..schemas import CatalogItem, SpeechAnalysis
from .catalog_index import iter_item_terms
from .corrections import ResolvedLine
from .normalizer import is_quantity_token, normalize_text
from .segments import FILLER_WORDS, OUT_OF
from .singularize import singularize_word


def _format_qty(qty) -> str:
    if isinstance(qty, float) and qty.is_integer():
        return str(int(qty))
    return str(qty)


def _display_name(by_id: Dict[str, CatalogItem], item_id: str) -> str:
    item = by_id.get(item_id)
    return item.display_name if item is not None else item_id


def _recognized_words(items: Sequence[CatalogItem]) -> Set[str]:
    words: Set[str] = set(OUT_OF)
    for item in items:
        for term in iter_item_terms(item):
            for token in normalize_text(term).split():
                words.add(token)
                words.add(singularize_word(token))
    return words


def analyze_speech_text(
    raw_text: Optional[str],
    lines: Sequence[ResolvedLine],
    catalog: Sequence[CatalogItem],
) -> SpeechAnalysis:
    by_id: Dict[str, CatalogItem] = {item.id: item for item in catalog}
    matched = [by_id[line.item_id] for line in lines if line.item_id in by_id]
    recognized = _recognized_words(matched)

    parsed_items = [
        f"{_format_qty(line.qty)} {_display_name(by_id, line.item_id)}" for line in lines
    ]

    unrecognized: List[str] = []
    current: List[str] = []
    for word in normalize_text(raw_text).split():
        known = (
            word in FILLER_WORDS
            or is_quantity_token(word)
            or word in recognized
            or singularize_word(word) in recognized
        )
        if not known:
            current.append(word)
        elif current:
            unrecognized.append(" ".join(current))
            current = []
    if current:
        unrecognized.append(" ".join(current))

    return SpeechAnalysis(
        rawText=raw_text or "",
        parsedItems=parsed_items,
        unrecognizedParts=unrecognized,
    )
