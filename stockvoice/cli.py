"""Command-line interface for resolving dictated stock counts."""

from __future__ import annotations

import argparse
import json
import logging
import math
import sys
from pathlib import Path
from typing import Iterable

from .config import get_settings
from .observability import configure_logging
from .services.analysis import analyze_speech_text
from .services.catalog_store import CatalogStoreError, load_catalog, load_location_overrides
from .services.flags import apply_flags, compute_flag
from .services.speech_parser import parse_speech_to_lines

logger = logging.getLogger(__name__)


def _finite_float(value: str) -> float:
    number = float(value)
    if not math.isfinite(number):
        raise argparse.ArgumentTypeError(f"expected a finite number, got {value!r}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Speech-to-inventory tooling")
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse = subparsers.add_parser("parse", help="Resolve a transcript into stock lines")
    parse.add_argument("text", help="Transcript text, e.g. 'ten avocado, out of cucumber'")
    parse.add_argument(
        "--catalog",
        type=Path,
        default=None,
        help="Path to catalog JSON (default: CATALOG_PATH setting)",
    )
    parse.add_argument(
        "--overrides",
        type=Path,
        default=None,
        help="Path to per-item low threshold overrides JSON",
    )
    parse.add_argument(
        "--default-low",
        type=_finite_float,
        default=None,
        help="Low threshold used when an item has no override",
    )
    parse.add_argument(
        "--analysis",
        action="store_true",
        help="Include recognized/unrecognized transcript parts in the output",
    )
    parse.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    parse.set_defaults(func=run_parse)

    classify = subparsers.add_parser("classify", help="Classify a single quantity")
    classify.add_argument("qty", type=_finite_float)
    classify.add_argument("--low", type=_finite_float, default=None, help="Low threshold override")
    classify.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    classify.set_defaults(func=run_classify)

    return parser


def run_parse(args: argparse.Namespace) -> int:
    configure_logging(json_logs=False, level=args.log_level)
    settings = get_settings()
    catalog_path = args.catalog or settings.catalog_path
    if not catalog_path:
        logger.error("No catalog configured; pass --catalog")
        return 1

    try:
        catalog = load_catalog(catalog_path, use_cache=False)
        overrides = load_location_overrides(args.overrides) if args.overrides else {}
    except CatalogStoreError as exc:
        logger.error("%s", exc)
        return 1

    default_low = args.default_low if args.default_low is not None else settings.default_low_threshold
    lines = parse_speech_to_lines(args.text, catalog)
    flagged = apply_flags(lines, overrides, default_low=default_low)

    payload: dict = {"lines": [line.to_payload() for line in flagged]}
    if args.analysis:
        payload["analysis"] = analyze_speech_text(args.text, lines, catalog).model_dump()
    sys.stdout.write(json.dumps(payload, ensure_ascii=False, indent=2) + "\n")
    return 0


def run_classify(args: argparse.Namespace) -> int:
    configure_logging(json_logs=False, level=args.log_level)
    settings = get_settings()
    flag = compute_flag(args.qty, args.low, default_low=settings.default_low_threshold)
    sys.stdout.write(flag.value + "\n")
    return 0


def main(argv: Iterable[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
