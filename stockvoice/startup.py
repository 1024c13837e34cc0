from __future__ import annotations

import logging
from pathlib import Path

from .config import Settings

logger = logging.getLogger(__name__)


def validate_settings(settings: Settings) -> None:
    """Fail fast when the catalog snapshot is not configured for non-dev envs."""
    environment = (settings.environment or "dev").lower()

    catalog_path = settings.catalog_path
    catalog_present = bool(catalog_path) and Path(catalog_path).is_file()

    if environment == "dev":
        if not catalog_present:
            logger.warning(
                "Running in dev without a catalog file at %s; /speech/parse requires an inline catalog",
                catalog_path,
            )
        return

    if not catalog_path:
        raise RuntimeError(
            f"Missing required configuration for environment '{environment}': CATALOG_PATH"
        )
    if not catalog_present:
        logger.warning("Catalog file %s not found at startup", catalog_path)
