"""
Identifier classifier for Indian identity documents.
Finds the document number in normalized OCR text and tags which
document type it belongs to.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Tuple

logger = logging.getLogger(__name__)


class IdentifierType(str, Enum):
    PAN = "PAN"
    AADHAR = "AADHAR"
    VOTER = "VOTER"
    NONE = "NONE"


@dataclass(frozen=True)
class IdentifierMatch:
    """Which identifier rule matched, the raw substring and its canonical form."""

    kind: IdentifierType
    raw: str = ""
    value: str = ""

    @classmethod
    def none(cls) -> "IdentifierMatch":
        return cls(IdentifierType.NONE)

    def __bool__(self) -> bool:
        return self.kind is not IdentifierType.NONE


# ==================== REGEX PATTERNS ====================

# All patterns are ASCII-only: Devanagari digits never count as ID digits

# PAN: 5 uppercase letters + 4 digits + 1 uppercase letter (e.g., ABCDE1234F)
PAN_PATTERN = re.compile(r'\b([A-Z]{5}[0-9]{4}[A-Z])\b', re.ASCII)

# Aadhaar: 12 digits, may be spaced as XXXX XXXX XXXX
AADHAR_PATTERN = re.compile(r'\b(\d{4}\s?\d{4}\s?\d{4})\b', re.ASCII)

# Voter ID (EPIC): 3 letters + 7 digits, OCR often splits them with a space
VOTER_PATTERN = re.compile(r'([A-Z]{3})\s*(\d{7})', re.IGNORECASE | re.ASCII)


def _canonical_pan(match: re.Match) -> str:
    return match.group(1)


def _canonical_aadhar(match: re.Match) -> str:
    return re.sub(r'\s', '', match.group(1))


def _canonical_voter(match: re.Match) -> str:
    return (match.group(1) + match.group(2)).upper()


# Priority order: most specific shape first, loosest shape last
IDENTIFIER_RULES: List[Tuple[IdentifierType, re.Pattern, Callable[[re.Match], str]]] = [
    (IdentifierType.PAN, PAN_PATTERN, _canonical_pan),
    (IdentifierType.AADHAR, AADHAR_PATTERN, _canonical_aadhar),
    (IdentifierType.VOTER, VOTER_PATTERN, _canonical_voter),
]


def classify_identifier(text: str) -> IdentifierMatch:
    """
    Find the identification number in normalized text.

    Rules are tried in IDENTIFIER_RULES order and the first one that
    matches wins, so a PAN number beats an Aadhaar-shaped digit run
    appearing anywhere else in the text.

    Args:
        text: Normalized OCR text

    Returns:
        IdentifierMatch for the winning rule, or IdentifierMatch.none()
    """
    if not text:
        return IdentifierMatch.none()

    for kind, pattern, canonicalize in IDENTIFIER_RULES:
        match = pattern.search(text)
        if match:
            value = canonicalize(match)
            logger.debug("%s match: %r -> %s", kind.value, match.group(0), value)
            return IdentifierMatch(kind, match.group(0), value)

    logger.debug("No identifier pattern matched")
    return IdentifierMatch.none()
