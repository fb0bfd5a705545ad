"""Extract name, ID number and date of birth from photographed Indian ID cards."""

from .classifier import IdentifierMatch, IdentifierType, classify_identifier
from .extractor import ExtractedRecord, normalize_text, parse_ocr_text

__all__ = [
    "ExtractedRecord",
    "IdentifierMatch",
    "IdentifierType",
    "classify_identifier",
    "normalize_text",
    "parse_ocr_text",
]
