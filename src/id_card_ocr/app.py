"""
ID Card OCR - Flask Application
Upload a photo of an ID card, read it with EasyOCR, extract the name,
ID number and date of birth, then edit and save the result locally.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FuturesTimeoutError
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from flask import Flask, current_app, jsonify, render_template, request
from werkzeug.exceptions import HTTPException
from werkzeug.utils import secure_filename

from . import config
from .confidence import confidence_percent
from .errors import OcrError, StorageError
from .extractor import FIELD_LABELS, parse_ocr_text
from .ocr import recognize_text
from .storage import KeyValueStore, load_record, save_record

logger = logging.getLogger(__name__)

OCR_FAILED_MESSAGE = "OCR failed. Please try again."
SAVE_OK_MESSAGE = "Data successfully saved locally!"
SAVE_FAILED_MESSAGE = "Failed to save data"


# -------------------- HELPERS --------------------

def allowed_file(filename, allowed_extensions=None):
    allowed = allowed_extensions or config.ALLOWED_EXTENSIONS
    return "." in filename and filename.rsplit(".", 1)[1].lower() in allowed


def process_document(file_path: str, filename: str, rng=None) -> Dict[str, Any]:
    """
    Process document: OCR -> Extract.
    This function runs in a thread with timeout. The uploaded photo is
    deleted once it has been read, even when the request already timed out.
    """
    logger.info("Processing: %s", filename)
    try:
        extracted_text = recognize_text(file_path)
    finally:
        remove_upload(file_path)

    record = parse_ocr_text(extracted_text, rng=rng)
    logger.info("Extracted fields: %s", [k for k, v in record.to_storage().items() if v])

    return {
        "extracted_text": extracted_text,
        "record": record,
    }


def remove_upload(file_path: str) -> None:
    try:
        os.remove(file_path)
    except FileNotFoundError:
        pass
    except OSError:
        logger.warning("Could not remove upload %s", file_path)


def build_scan_response(processing_result: Dict[str, Any]) -> Dict[str, Any]:
    record = processing_result["record"]
    return {
        "status": "success",
        "fields": record.to_storage(),
        "confidence": dict(record.confidence),
        "confidence_percent": {
            field: confidence_percent(value) for field, value in record.confidence.items()
        },
        "labels": dict(FIELD_LABELS),
        "extracted_text": processing_result["extracted_text"],
    }


def get_store() -> KeyValueStore:
    return KeyValueStore(current_app.config["STORE_PATH"])


# -------------------- APP FACTORY --------------------

def create_app(config_overrides: Optional[Dict[str, Any]] = None) -> Flask:
    app = Flask(__name__, template_folder=str(config.BASE_DIR / "templates"))
    app.config.update(
        UPLOAD_DIR=config.UPLOAD_DIR,
        STORE_PATH=config.STORE_PATH,
        PROCESSING_TIMEOUT=config.PROCESSING_TIMEOUT,
        ALLOWED_EXTENSIONS=config.ALLOWED_EXTENSIONS,
        CONFIDENCE_RNG=None,
    )
    if config_overrides:
        app.config.update(config_overrides)

    app.config["UPLOAD_DIR"] = Path(app.config["UPLOAD_DIR"])
    app.config["UPLOAD_DIR"].mkdir(parents=True, exist_ok=True)

    register_routes(app)
    return app


# -------------------- ROUTES --------------------

def register_routes(app: Flask) -> None:

    @app.route("/")
    def index():
        return render_template("index.html", labels=FIELD_LABELS)

    @app.route("/scan", methods=["POST"])
    def scan_document():
        """Read an uploaded ID card photo and extract its fields."""
        file = request.files.get("document")

        if not file or file.filename == '':
            return jsonify({"status": "error", "message": "No file uploaded"}), 400

        allowed = app.config["ALLOWED_EXTENSIONS"]
        if not allowed_file(file.filename, allowed):
            return jsonify({
                "status": "error",
                "message": f"Invalid file type. Allowed: {', '.join(sorted(allowed))}",
            }), 400

        filename = secure_filename(file.filename)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        file_path = app.config["UPLOAD_DIR"] / f"{timestamp}_{filename}"
        file.save(file_path)

        timeout = app.config["PROCESSING_TIMEOUT"]
        executor = ThreadPoolExecutor(max_workers=1)
        try:
            future = executor.submit(
                process_document, str(file_path), filename, app.config["CONFIDENCE_RNG"]
            )
            processing_result = future.result(timeout=timeout)
        except FuturesTimeoutError:
            logger.warning("Processing %s timed out after %s seconds", filename, timeout)
            return jsonify({
                "status": "error",
                "message": f"Processing timed out after {timeout} seconds. Please try with a clearer image.",
            }), 408
        except OcrError:
            logger.exception("OCR Error for %s", filename)
            return jsonify({"status": "error", "message": OCR_FAILED_MESSAGE}), 502
        finally:
            # Do not block the request on a recognizer that is still running
            executor.shutdown(wait=False)

        return jsonify(build_scan_response(processing_result))

    @app.route("/save", methods=["POST"])
    def save_data():
        """Save the current (possibly edited) fields locally."""
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({"success": False, "error": "Expected a JSON object"}), 400

        try:
            record = save_record(get_store(), data)
        except StorageError:
            logger.exception("Save Error")
            return jsonify({"success": False, "error": SAVE_FAILED_MESSAGE}), 500

        return jsonify({"success": True, "message": SAVE_OK_MESSAGE, "data": record})

    @app.route("/saved")
    def saved_data():
        """Return the locally saved record."""
        try:
            record = load_record(get_store())
        except StorageError as e:
            logger.exception("Load Error")
            return jsonify({"success": False, "error": str(e)}), 500

        if record is None:
            return jsonify({"success": False, "error": "No saved data"}), 404
        return jsonify({"success": True, "data": record})

    @app.errorhandler(Exception)
    def handle_exception(e):
        if isinstance(e, HTTPException):
            return e
        logger.exception("Unhandled error")
        return jsonify({"status": "error", "message": str(e)}), 500


# -------------------- MAIN --------------------

def main():
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = create_app()

    print("\n" + "=" * 60)
    print("  ID Card OCR")
    print("  Using EasyOCR (Free & Open Source)")
    print(f"  Processing timeout: {config.PROCESSING_TIMEOUT} seconds")
    print("=" * 60)
    print("\nFirst run may take a minute to download OCR models...")
    print("Server starting at http://localhost:5000\n")

    app.run(debug=False, host='0.0.0.0', port=5000)


if __name__ == "__main__":
    main()
