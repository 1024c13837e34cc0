"""Transcript normalization and spoken-number decoding."""

from __future__ import annotations

import logging
import math
import re
import unicodedata
from typing import List, Optional, Sequence, Tuple, Union

logger = logging.getLogger(__name__)

Quantity = Union[int, float]

UNIT_WORDS = {
    "zero": 0,
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
}
TEEN_WORDS = {
    "ten": 10,
    "eleven": 11,
    "twelve": 12,
    "thirteen": 13,
    "fourteen": 14,
    "fifteen": 15,
    "sixteen": 16,
    "seventeen": 17,
    "eighteen": 18,
    "nineteen": 19,
}
TENS_WORDS = {
    "twenty": 20,
    "thirty": 30,
    "forty": 40,
    "fifty": 50,
    "sixty": 60,
    "seventy": 70,
    "eighty": 80,
    "ninety": 90,
}
SCALE_WORDS = {"hundred": 100, "thousand": 1000}

NUMBER_WORD_VALUES = {**UNIT_WORDS, **TEEN_WORDS, **TENS_WORDS, **SCALE_WORDS}

MAX_QUANTITY = 100000

APOSTROPHES = re.compile(r"['‘’ʼ`]")
NON_WORD = re.compile(r"[^\w\s.]|_")
STRAY_DOT = re.compile(r"(?<![0-9])\.|\.(?![0-9])")
WHITESPACE = re.compile(r"\s+")
COMPACT_STRIP = re.compile(r"[\s\-.]+")
QUANTITY_TOKEN = re.compile(r"[0-9]+(?:\.[0-9]+)*")


def fold_diacritics(text: str) -> str:
    normalized = unicodedata.normalize("NFKD", text)
    return "".join(char for char in normalized if not unicodedata.combining(char))


def _read_number(
    words: Sequence[str],
    start: int,
    current: int = 0,
    last: Optional[str] = None,
) -> Tuple[int, int]:
    """Decode the longest well-formed number-word run starting at ``start``.

    Returns ``(value, end)``; ``end == start`` when no number word is there.
    Two independent numbers ("five six") are never merged into one.
    ``current``/``last`` seed the run with a value already read as digits.
    """
    total = 0
    index = start
    while index < len(words):
        word = words[index]
        if last == "zero":
            break
        if word in UNIT_WORDS:
            value = UNIT_WORDS[word]
            if value == 0:
                if last is not None:
                    break
                last = "zero"
                index += 1
                continue
            if last not in (None, "tens", "hundred", "thousand"):
                break
            current += value
            last = "unit"
        elif word in TEEN_WORDS:
            if last not in (None, "hundred", "thousand"):
                break
            current += TEEN_WORDS[word]
            last = "teen"
        elif word in TENS_WORDS:
            if last not in (None, "hundred", "thousand"):
                break
            current += TENS_WORDS[word]
            last = "tens"
        elif word == "hundred":
            if last not in (None, "unit", "teen"):
                break
            if current % 100 != current:
                break
            current = (current or 1) * 100
            last = "hundred"
        elif word == "thousand":
            if total or last not in (None, "unit", "teen", "tens", "hundred"):
                break
            total = (current or 1) * 1000
            current = 0
            last = "thousand"
        else:
            break
        index += 1
    return total + current, index


def words_to_number(words: Sequence[str]) -> Optional[int]:
    """Decode a full sequence of number words, or ``None`` if any are left over."""
    tokens = [word.lower() for word in words if word]
    if not tokens:
        return None
    value, end = _read_number(tokens, 0)
    if end != len(tokens):
        return None
    return value


def replace_number_words(text: str) -> str:
    tokens = text.split()
    out: List[str] = []
    index = 0
    while index < len(tokens):
        token = tokens[index]
        if (
            index + 1 < len(tokens)
            and tokens[index + 1] in SCALE_WORDS
            and token.isascii()
            and token.isdigit()
            and len(token) <= 3
            and int(token) > 0
        ):
            # "5 hundred" reads as one number
            value, end = _read_number(tokens, index + 1, current=int(token), last="teen")
            if end == index + 1:
                out.append(token)
                index += 1
                continue
            out.append(str(value))
            index = end
            continue
        value, end = _read_number(tokens, index)
        if end == index:
            out.append(tokens[index])
            index += 1
            continue
        out.append(str(value))
        index = end
    return " ".join(out)


def normalize_text(text: Optional[str]) -> str:
    """Lowercase, strip punctuation/diacritics, spell numbers as digits.

    Decimal points between digits survive so "2.5" stays a quantity.
    Idempotent.
    """
    if not text:
        return ""
    # Fold before and after casefolding: NFKD can yield uppercase ASCII
    # (e.g. mathematical bold letters) and casefolding can yield combining marks.
    working = fold_diacritics(fold_diacritics(str(text)).casefold())
    working = APOSTROPHES.sub("", working)
    working = NON_WORD.sub(" ", working)
    working = STRAY_DOT.sub(" ", working)
    working = replace_number_words(working)
    return WHITESPACE.sub(" ", working).strip()


def compact_form(text: str) -> str:
    """Canonical text with spaces, hyphens and dots removed."""
    return COMPACT_STRIP.sub("", text or "")


def is_quantity_token(token: str) -> bool:
    if not token:
        return False
    return bool(QUANTITY_TOKEN.fullmatch(token)) or token in NUMBER_WORD_VALUES


def decode_quantity(token: str) -> Optional[Quantity]:
    """Decode a digit or number-word token; ``None`` when it is not usable."""
    if not token:
        return None
    if token in NUMBER_WORD_VALUES:
        return NUMBER_WORD_VALUES[token]
    if not QUANTITY_TOKEN.fullmatch(token):
        return None
    try:
        value = float(token)
    except ValueError:
        logger.debug("Malformed quantity token %r", token)
        return None
    if not math.isfinite(value) or value > MAX_QUANTITY:
        logger.debug("Quantity %r out of range", token)
        return None
    if value.is_integer():
        return int(value)
    return value
