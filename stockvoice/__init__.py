"""Speech-to-inventory resolution engine."""

from .services.flags import DEFAULT_LOW_THRESHOLD, StockFlag, compute_flag
from .services.normalizer import normalize_text
from .services.speech_parser import parse_speech, parse_speech_to_lines

__all__ = [
    "DEFAULT_LOW_THRESHOLD",
    "StockFlag",
    "compute_flag",
    "normalize_text",
    "parse_speech",
    "parse_speech_to_lines",
]
