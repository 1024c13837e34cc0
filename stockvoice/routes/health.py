from __future__ import annotations

import os
from pathlib import Path

from fastapi import APIRouter

from ..config import get_settings


router = APIRouter()


@router.get("/health")
def health():
    s = get_settings()
    catalog_path = s.catalog_path
    return {
        "status": "ok",
        "service": s.app_name,
        "env": s.environment,
        "catalogAvailable": bool(catalog_path) and Path(catalog_path).is_file(),
        "defaultLowThreshold": s.default_low_threshold,
        "pid": os.getpid(),
    }
