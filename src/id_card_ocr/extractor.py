"""
Field extractor for photographed Indian identity cards.

Takes the raw text returned by OCR and pulls out:
- Name
- ID number (PAN, Aadhaar or Voter ID, see classifier.py)
- Date of birth

Every field defaults to an empty string when it cannot be found.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from .classifier import IdentifierMatch, IdentifierType, classify_identifier
from .confidence import CONFIDENCE_FIELDS, synthesize_confidence

logger = logging.getLogger(__name__)


# ==================== CONSTANTS ====================

# Card title words printed before the number on PAN cards ("ZTI" is a common
# misread of the Income Tax emblem)
PAN_NOISE_WORDS = ["PERMANENT", "ACCOUNT", "NUMBER", "CARD", "ZTI"]

# Record fields in display order, with their form labels
FIELD_LABELS = {
    "name": "NAME",
    "idNumber": "ID NUMBER",
    "dob": "DOB",
}

# "Name: VALUE" / "Name - VALUE" label anywhere in the text
NAME_LABEL_PATTERN = re.compile(r'(?:^|[^A-Za-z])(Name)\s*[:\-]?\s*([A-Za-z]+)', re.IGNORECASE)

# DD/MM/YYYY or DD-MM-YYYY (separators checked independently); YYYY-MM-DD also accepted
DATE_PATTERN = re.compile(r'\b(\d{2}[/-]\d{2}[/-]\d{4}|\d{4}[/-]\d{2}[/-]\d{2})\b', re.ASCII)

_NOISE_PATTERN = re.compile(
    r'\b(?:' + '|'.join(re.escape(word) for word in PAN_NOISE_WORDS) + r')\b',
    re.IGNORECASE | re.ASCII,
)


@dataclass(frozen=True)
class ExtractedRecord:
    """Result of one extraction call."""

    name: str = ""
    id_number: str = ""
    dob: str = ""
    confidence: Dict[str, float] = field(default_factory=dict)

    def to_storage(self) -> Dict[str, str]:
        """Persisted form; confidence is never saved."""
        return {"name": self.name, "idNumber": self.id_number, "dob": self.dob}

    def to_dict(self) -> Dict[str, object]:
        data = self.to_storage()
        data["confidence"] = dict(self.confidence)
        return data


# ==================== HELPER FUNCTIONS ====================

def normalize_text(text: Optional[str]) -> str:
    """Turn newlines into spaces, collapse whitespace runs and trim."""
    if not text:
        return ""
    text = text.replace('\n', ' ')
    text = re.sub(r'\s+', ' ', text)
    return text.strip()


# ==================== NAME EXTRACTION ====================

def extract_name_from_pan(text: str, match: IdentifierMatch) -> str:
    """
    Name on a PAN card sits right before the number.

    Keeps the text before the PAN, strips the card title words and any
    non-letters, then returns the last remaining word only.
    """
    before_id = text.split(match.value, 1)[0]
    before_id = _NOISE_PATTERN.sub('', before_id)
    before_id = re.sub(r'[^A-Za-z\s]', '', before_id).strip()

    name_parts = before_id.split()
    if not name_parts:
        return ""
    return name_parts[-1]


def extract_name_from_label(text: str, match: IdentifierMatch) -> str:
    """Alphabetic run following a "Name:" label, or empty."""
    name_match = NAME_LABEL_PATTERN.search(text)
    if name_match:
        return name_match.group(2).strip()
    return ""


NAME_STRATEGIES: Dict[IdentifierType, Callable[[str, IdentifierMatch], str]] = {
    IdentifierType.PAN: extract_name_from_pan,
}


def select_name_strategy(kind: IdentifierType) -> Callable[[str, IdentifierMatch], str]:
    """Only PAN cards use the position-based strategy; everything else uses the label."""
    return NAME_STRATEGIES.get(kind, extract_name_from_label)


def extract_name(text: str, match: IdentifierMatch) -> str:
    strategy = select_name_strategy(match.kind)
    logger.debug("Name strategy for %s: %s", match.kind.value, strategy.__name__)
    return strategy(text, match)


# ==================== DATE EXTRACTION ====================

def extract_dob(text: str) -> str:
    """First date-shaped token in the text, or empty."""
    match = DATE_PATTERN.search(text)
    if match:
        return match.group(1)
    return ""


# ==================== MAIN EXTRACTION FUNCTION ====================

def parse_ocr_text(text: Optional[str], rng=None) -> ExtractedRecord:
    """
    Extract structured fields from OCR text.

    Args:
        text: Raw OCR text (text blocks joined with newlines), may be None
        rng: Random source for the placeholder confidence scores

    Returns:
        ExtractedRecord; empty input gives an empty record with no confidence
    """
    clean_text = normalize_text(text)
    if not clean_text:
        return ExtractedRecord()

    id_match = classify_identifier(clean_text)
    name = extract_name(clean_text, id_match)
    dob = extract_dob(clean_text)

    return ExtractedRecord(
        name=name,
        id_number=id_match.value,
        dob=dob,
        confidence=synthesize_confidence(CONFIDENCE_FIELDS, rng),
    )
