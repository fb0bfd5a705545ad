"""
Application settings.
Every value can be overridden with an environment variable.
"""

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).parent


def _env_number(name: str, default: float) -> float:
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        number = float(value)
    except ValueError:
        number = 0
    if not number > 0:
        logger.warning("Ignoring invalid %s=%r, using %s", name, value, default)
        return default
    return number


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


UPLOAD_DIR = Path(os.environ.get("ID_OCR_UPLOAD_DIR", str(BASE_DIR / "uploads")))
STORE_PATH = Path(os.environ.get("ID_OCR_STORE_PATH", str(UPLOAD_DIR / "storage.json")))

ALLOWED_EXTENSIONS = {"png", "jpg", "jpeg"}
PROCESSING_TIMEOUT = _env_number("ID_OCR_TIMEOUT", 30)  # seconds

# EasyOCR language codes, comma separated
OCR_LANGUAGES = [lang.strip() for lang in os.environ.get("ID_OCR_LANGUAGES", "en").split(",") if lang.strip()]
OCR_GPU = _env_bool("ID_OCR_GPU", False)

LOG_LEVEL = os.environ.get("ID_OCR_LOG_LEVEL", "INFO").upper()
