"""Stock-level flags derived from a counted quantity and a low threshold."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional

from .normalizer import Quantity

DEFAULT_LOW_THRESHOLD = 5


class StockFlag(str, Enum):
    OK = "ok"
    LOW = "low"
    OUT = "out"


@dataclass(frozen=True)
class FlaggedLine:
    item_id: str
    qty: Quantity
    flag: StockFlag

    def to_payload(self) -> dict:
        return {"itemId": self.item_id, "qty": self.qty, "flag": self.flag.value}


def _usable_threshold(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def compute_flag(
    qty: Quantity,
    low: Optional[Quantity] = None,
    *,
    default_low: Quantity = DEFAULT_LOW_THRESHOLD,
) -> StockFlag:
    """Classify ``qty`` against ``low`` (or ``default_low`` when unusable)."""
    if qty <= 0:
        return StockFlag.OUT
    threshold = low if _usable_threshold(low) else default_low
    if qty <= threshold:
        return StockFlag.LOW
    return StockFlag.OK


def resolve_threshold(override: Any) -> Optional[Quantity]:
    """Extract a low threshold from an override entry.

    Accepts a bare number, a mapping with ``lowThreshold`` or an object with a
    ``lowThreshold`` attribute; anything else means "no override".
    """
    if override is None:
        return None
    if isinstance(override, Mapping):
        value = override.get("lowThreshold")
    else:
        value = getattr(override, "lowThreshold", override)
    return value if _usable_threshold(value) else None


def apply_flags(
    lines: Iterable[Any],
    overrides: Optional[Mapping[str, Any]] = None,
    *,
    default_low: Quantity = DEFAULT_LOW_THRESHOLD,
) -> List[FlaggedLine]:
    overrides = overrides or {}
    flagged: List[FlaggedLine] = []
    for line in lines:
        low = resolve_threshold(overrides.get(line.item_id))
        flagged.append(
            FlaggedLine(
                item_id=line.item_id,
                qty=line.qty,
                flag=compute_flag(line.qty, low, default_low=default_low),
            )
        )
    return flagged
