"""Plural -> singular folding for catalog matching.

Both catalog keys and spoken phrases go through the same rules, so a stem
only has to be consistent, not linguistically perfect.
"""

from __future__ import annotations

from functools import lru_cache
from typing import List

import inflect

_INFLECT = inflect.engine()

# Words that end in "s" but are not plurals.
INVARIANT_WORDS = {
    "asparagus",
    "couscous",
    "hummus",
    "molasses",
    "swiss",
    "species",
    "series",
}

PROTECTED_SUFFIXES = ("ss", "us", "is")


@lru_cache(maxsize=4096)
def singularize_word(word: str) -> str:
    if not word or not word.isalpha() or len(word) <= 3:
        return word
    if word in INVARIANT_WORDS or word.endswith(PROTECTED_SUFFIXES):
        return word
    # singular_noun returns False for words that are already singular
    singular = _INFLECT.singular_noun(word)
    if isinstance(singular, str) and singular:
        return singular
    return word


def singularize_phrase(text: str) -> str:
    return " ".join(singularize_word(token) for token in text.split())


def plural_variants(word: str) -> List[str]:
    """Naive plural forms used by the equality fallback scan."""
    if not word:
        return []
    variants = [word + "s", word + "es"]
    if word.endswith("y") and len(word) > 1:
        variants.append(word[:-1] + "ies")
    return variants
