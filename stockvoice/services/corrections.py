from __future__ import annotations

from dataclasses import dataclass
from functools import reduce
from typing import Dict, Iterable, List, Tuple

from .normalizer import Quantity


@dataclass(frozen=True)
class ResolvedLine:
    item_id: str
    qty: Quantity

    def to_payload(self) -> dict:
        return {"itemId": self.item_id, "qty": self.qty}


def _fold(acc: Dict[str, Quantity], match: Tuple[str, Quantity]) -> Dict[str, Quantity]:
    item_id, qty = match
    # Reassigning an existing key keeps its first-insertion position.
    return {**acc, item_id: qty}


def resolve_corrections(matches: Iterable[Tuple[str, Quantity]]) -> List[ResolvedLine]:
    """Fold ordered matches so the last mention of each item wins."""
    resolved = reduce(_fold, matches, {})
    return [ResolvedLine(item_id=item_id, qty=qty) for item_id, qty in resolved.items()]
