from __future__ import annotations

import logging
from typing import Dict, List

from fastapi import APIRouter, HTTPException, status

from ..config import get_settings
from ..schemas import (
    CatalogItem,
    ClassifyRequest,
    ClassifyResponse,
    FlaggedLinePayload,
    LocationOverride,
    SpeechParseRequest,
    SpeechParseResponse,
)
from ..services.analysis import analyze_speech_text
from ..services.catalog_index import CatalogIndexCache
from ..services.catalog_store import CatalogStoreError, load_catalog, load_location_overrides
from ..services.flags import apply_flags, compute_flag
from ..services.speech_parser import parse_speech_to_lines

logger = logging.getLogger(__name__)

router = APIRouter()

_index_cache = CatalogIndexCache()


def _configured_catalog() -> List[CatalogItem]:
    s = get_settings()
    if not s.catalog_path:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Catalog not configured",
        )
    try:
        return load_catalog(s.catalog_path, use_cache=s.catalog_cache_enabled)
    except CatalogStoreError as exc:
        logger.warning("Catalog unavailable: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc


def _configured_overrides() -> Dict[str, LocationOverride]:
    s = get_settings()
    if not s.overrides_path:
        return {}
    try:
        return load_location_overrides(s.overrides_path)
    except CatalogStoreError as exc:
        logger.warning("Location overrides unavailable: %s", exc)
        return {}


@router.post("/speech/parse", response_model=SpeechParseResponse)
def parse_speech_route(request: SpeechParseRequest) -> SpeechParseResponse:
    s = get_settings()
    if request.catalog is not None:
        catalog = list(request.catalog)
        index = None
    else:
        catalog = _configured_catalog()
        index = _index_cache.get(catalog)
    overrides = request.overrides if request.overrides is not None else _configured_overrides()
    default_low = (
        request.defaultLowThreshold
        if request.defaultLowThreshold is not None
        else s.default_low_threshold
    )

    lines = parse_speech_to_lines(request.text, catalog, index=index)
    flagged = apply_flags(lines, overrides, default_low=default_low)
    logger.info("Resolved %s stock lines from speech", len(flagged))
    return SpeechParseResponse(
        lines=[FlaggedLinePayload(**line.to_payload()) for line in flagged],
        analysis=analyze_speech_text(request.text, lines, catalog),
    )


@router.post("/flags/classify", response_model=ClassifyResponse)
def classify_route(request: ClassifyRequest) -> ClassifyResponse:
    s = get_settings()
    flag = compute_flag(request.qty, request.lowThreshold, default_low=s.default_low_threshold)
    return ClassifyResponse(flag=flag)
