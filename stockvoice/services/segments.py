"""Split a spoken transcript into ``(quantity, phrase)`` segments."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from .normalizer import Quantity, decode_quantity, is_quantity_token, normalize_text

logger = logging.getLogger(__name__)

# Commas, semicolons, sentence punctuation and the standalone word "and".
# "&" stays inside names such as "mac & cheese".
DELIMITER_PATTERN = re.compile(r"[,;!?]|(?<![0-9])\.|\.(?![0-9])|\band\b")

FILLER_WORDS = frozenset(
    {
        "a",
        "actually",
        "an",
        "and",
        "correction",
        "er",
        "erm",
        "hmm",
        "i",
        "mean",
        "no",
        "oh",
        "ok",
        "okay",
        "oops",
        "please",
        "sorry",
        "the",
        "uh",
        "uhh",
        "um",
        "umm",
        "wait",
    }
)

OUT_OF = ("out", "of")


@dataclass(frozen=True)
class ParsedSegment:
    quantity: Quantity
    phrase: str


def split_on_delimiters(text: str) -> List[str]:
    """Split on explicit delimiters; returns the non-empty parts."""
    parts = DELIMITER_PATTERN.split(str(text or "").lower())
    return [part.strip() for part in parts if part and part.strip()]


def strip_fillers(words: List[str]) -> List[str]:
    return [word for word in words if word not in FILLER_WORDS]


def scan_segments(normalized: str) -> List[ParsedSegment]:
    """Number-anchored scan over normalized text.

    A quantity token, or "out of" (quantity 0), opens a segment; the words
    after it form the phrase until the next quantity. Words before the first
    quantity are ignored.
    """
    tokens = normalized.split()
    pending: List[tuple[Optional[Quantity], str, List[str]]] = []
    index = 0
    while index < len(tokens):
        token = tokens[index]
        if is_quantity_token(token):
            pending.append((decode_quantity(token), token, []))
            index += 1
            continue
        if tuple(tokens[index : index + 2]) == OUT_OF:
            pending.append((0, "out of", []))
            index += 2
            continue
        if pending:
            pending[-1][2].append(token)
        index += 1

    segments: List[ParsedSegment] = []
    for quantity, anchor, words in pending:
        phrase = " ".join(strip_fillers(words))
        if quantity is None:
            logger.debug("Dropping segment with unusable quantity %r", anchor)
            continue
        if not phrase:
            logger.debug("Dropping segment %r with no item phrase", anchor)
            continue
        segments.append(ParsedSegment(quantity=quantity, phrase=phrase))
    return segments


def extract_segments(text: Optional[str]) -> List[ParsedSegment]:
    """Turn a raw transcript into ordered segments.

    The transcript is split on delimiters first; each part (the whole
    transcript when there are no delimiters) is normalized and scanned for
    number anchors, so "5 green onion 3 edamame" and "5 green onion, 3
    edamame" yield the same segments.
    """
    if not text or not str(text).strip():
        return []
    segments: List[ParsedSegment] = []
    for part in split_on_delimiters(text):
        normalized = normalize_text(part)
        if normalized:
            segments.extend(scan_segments(normalized))
    return segments
