"""
Synthetic confidence scores.

These are placeholders for a real OCR-engine confidence metric: every
field gets an independent random value in [0.90, 1.00], whether or not
the field was extracted. Swap this module out once the recognizer
reports per-field confidence.
"""

import random
from typing import Dict, Iterable, Optional

# Logical fields that get a score ("fatherName" is scored but never extracted)
CONFIDENCE_FIELDS = ("name", "fatherName", "idNumber", "dob")

CONFIDENCE_MIN = 0.90
CONFIDENCE_MAX = 1.00

_default_rng = random.Random()


def mock_confidence(rng=None) -> float:
    """Draw one placeholder score, rounded to two decimals."""
    source = rng if rng is not None else _default_rng
    value = round(source.uniform(CONFIDENCE_MIN, CONFIDENCE_MAX), 2)
    return min(max(value, CONFIDENCE_MIN), CONFIDENCE_MAX)


def synthesize_confidence(
    fields: Iterable[str] = CONFIDENCE_FIELDS, rng: Optional[random.Random] = None
) -> Dict[str, float]:
    """
    Build the confidence mapping for a record.

    Args:
        fields: Field names to score
        rng: Anything with a ``uniform(a, b)`` method; tests pass a fixed one

    Returns:
        Dictionary of field name -> score in [0.90, 1.00]
    """
    return {field: mock_confidence(rng) for field in fields}


def confidence_percent(value: Optional[float]) -> Optional[int]:
    """Score as shown to the user (value x 100, rounded)."""
    if value is None:
        return None
    return int(round(value * 100))
