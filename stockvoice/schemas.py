from __future__ import annotations

import math
import re
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .services.flags import StockFlag

SYNONYM_DELIMITERS = re.compile(r"[,;|]")


def split_synonyms(value: Any) -> Tuple[str, ...]:
    """Coerce a synonyms field (delimited string, list or None) into a tuple."""
    if value is None:
        return ()
    if isinstance(value, str):
        raw_parts: List[Any] = SYNONYM_DELIMITERS.split(value)
    elif isinstance(value, (list, tuple, set, frozenset)):
        raw_parts = list(value)
    else:
        raw_parts = [value]
    seen: set[str] = set()
    synonyms: List[str] = []
    for part in raw_parts:
        if part is None:
            continue
        text = str(part).strip()
        if not text or text in seen:
            continue
        seen.add(text)
        synonyms.append(text)
    return tuple(synonyms)


class CatalogItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str = ""
    synonyms: Tuple[str, ...] = ()
    defaultUnit: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v):
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, v):
        if v is None:
            return ""
        return str(v).strip()

    @field_validator("synonyms", mode="before")
    @classmethod
    def _normalize_synonyms(cls, v):
        return split_synonyms(v)

    @property
    def display_name(self) -> str:
        return self.name or self.id


class LocationOverride(BaseModel):
    lowThreshold: float

    @field_validator("lowThreshold", mode="before")
    @classmethod
    def _require_number(cls, v):
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError("lowThreshold must be a number")
        if not math.isfinite(v):
            raise ValueError("lowThreshold must be finite")
        return v


class FlaggedLinePayload(BaseModel):
    itemId: str
    qty: Union[int, float]
    flag: StockFlag


class SpeechAnalysis(BaseModel):
    rawText: str
    parsedItems: List[str] = Field(default_factory=list)
    unrecognizedParts: List[str] = Field(default_factory=list)


class SpeechParseRequest(BaseModel):
    text: str = Field(default="", max_length=10000)
    catalog: Optional[List[CatalogItem]] = None
    overrides: Optional[Dict[str, LocationOverride]] = None
    defaultLowThreshold: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)


class SpeechParseResponse(BaseModel):
    lines: List[FlaggedLinePayload]
    analysis: SpeechAnalysis


class ClassifyRequest(BaseModel):
    qty: float = Field(allow_inf_nan=False)
    lowThreshold: Optional[float] = Field(default=None, allow_inf_nan=False)


class ClassifyResponse(BaseModel):
    flag: StockFlag
