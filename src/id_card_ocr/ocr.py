"""
OCR module using EasyOCR (free, open-source).
Turns a photographed ID card into raw text: one detected line per row,
joined with newlines.
"""

import logging
import os
import tempfile
import threading
from typing import List

from PIL import Image, ImageEnhance, UnidentifiedImageError

from . import config
from .errors import OcrError

logger = logging.getLogger(__name__)

# Detections whose top edges are closer than this belong to the same line
LINE_TOLERANCE_PX = 20

MIN_DIMENSION = 1000

# Applied in order after upscaling
ENHANCEMENTS = (
    (ImageEnhance.Contrast, 1.3),
    (ImageEnhance.Sharpness, 1.5),
    (ImageEnhance.Brightness, 1.1),
)

# Lazy load EasyOCR to speed up imports; one model per process
_reader = None
_reader_lock = threading.Lock()


def get_reader():
    """Get or create the shared EasyOCR reader built from config."""
    global _reader
    with _reader_lock:
        if _reader is None:
            import easyocr

            logger.info("Loading EasyOCR model for %s", ", ".join(config.OCR_LANGUAGES))
            _reader = easyocr.Reader(list(config.OCR_LANGUAGES), gpu=config.OCR_GPU, verbose=False)
        return _reader


def _upscale_factor(size) -> float:
    width, height = size
    if width >= MIN_DIMENSION and height >= MIN_DIMENSION:
        return 1.0
    return max(MIN_DIMENSION / width, MIN_DIMENSION / height)


def preprocess_image_for_ocr(image: Image.Image) -> Image.Image:
    """Convert to RGB, upscale small card photos and sharpen them for the detector."""
    image = image.convert('RGB') if image.mode != 'RGB' else image

    factor = _upscale_factor(image.size)
    if factor > 1.0:
        target = tuple(int(side * factor) for side in image.size)
        image = image.resize(target, Image.Resampling.LANCZOS)

    for enhancer, amount in ENHANCEMENTS:
        image = enhancer(image).enhance(amount)
    return image


def group_into_lines(results) -> List[str]:
    """
    Merge EasyOCR detections into text lines in reading order.

    Args:
        results: EasyOCR ``readtext(detail=1)`` output, (bbox, text, conf) tuples

    Returns:
        One string per row, words ordered left to right
    """
    rows = []  # [top_y, [(x, text), ...]]
    for bbox, text, _conf in sorted(results, key=lambda r: (r[0][0][1], r[0][0][0])):
        left, top = bbox[0][0], bbox[0][1]
        if not rows or abs(top - rows[-1][0]) >= LINE_TOLERANCE_PX:
            rows.append([top, []])
        rows[-1][1].append((left, text))

    return [' '.join(text for _, text in sorted(words, key=lambda w: w[0])) for _, words in rows]


def recognize_blocks(image_path: str, preprocess: bool = True) -> List[str]:
    """
    Run EasyOCR on an image file.

    Args:
        image_path: Path to the image file
        preprocess: Whether to apply image preprocessing first

    Returns:
        Recognized text lines in reading order

    Raises:
        OcrError: if the image cannot be opened or recognition fails
    """
    temp_path = None
    try:
        reader = get_reader()
        source = image_path
        if preprocess:
            with Image.open(image_path) as img:
                img = preprocess_image_for_ocr(img)
                with tempfile.NamedTemporaryFile(suffix='.png', delete=False) as tmp:
                    temp_path = tmp.name
                img.save(temp_path, 'PNG')
            source = temp_path

        results = reader.readtext(source, detail=1, paragraph=False)
    except (OSError, UnidentifiedImageError) as e:
        raise OcrError(f"Could not read image {image_path}: {e}") from e
    except Exception as e:
        raise OcrError(f"Text recognition failed: {e}") from e
    finally:
        if temp_path:
            try:
                os.remove(temp_path)
            except OSError:
                logger.warning("Could not remove temp file %s", temp_path)

    return group_into_lines(results)


def recognize_text(image_path: str, preprocess: bool = True) -> str:
    """Recognized text of an image, one line per detected row."""
    blocks = recognize_blocks(image_path, preprocess=preprocess)
    text = '\n'.join(blocks)
    logger.info("OCR completed for %s, text length: %d", os.path.basename(image_path), len(text))
    return text
