"""
Local key-value store for saved card data.

A single JSON file maps string keys to string values. The edited record
is stored JSON-encoded under STORAGE_KEY.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Mapping, Optional

from .errors import StorageError

logger = logging.getLogger(__name__)

STORAGE_KEY = "ocrUserData"

RECORD_FIELDS = ("name", "idNumber", "dob")


class KeyValueStore:
    """String key-value pairs persisted to one JSON file."""

    def __init__(self, path):
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding='utf-8'))
        except (OSError, ValueError) as e:
            raise StorageError(f"Could not read store {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Store {self.path} does not hold a JSON object")
        return data

    def _write(self, data: Dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(dir=str(self.path.parent), suffix='.tmp')
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(temp_path, self.path)
        except OSError as e:
            raise StorageError(f"Could not write store {self.path}: {e}") from e

    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError("KeyValueStore values must be strings")
        data = self._read()
        data[key] = value
        self._write(data)

    def remove_item(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)


def _record_fields(fields: Mapping[str, object]) -> Dict[str, str]:
    record = {}
    for name in RECORD_FIELDS:
        value = fields.get(name)
        record[name] = "" if value is None else str(value)
    return record


def save_record(store: KeyValueStore, fields: Mapping[str, object]) -> Dict[str, str]:
    """
    Persist the current (possibly edited) record.

    Only name, idNumber and dob are kept; anything else, confidence
    included, is dropped.

    Returns:
        The record exactly as saved
    """
    record = _record_fields(fields)
    store.set_item(STORAGE_KEY, json.dumps(record, ensure_ascii=False))
    logger.info("Data saved locally under %s", STORAGE_KEY)
    return record


def load_record(store: KeyValueStore) -> Optional[Dict[str, str]]:
    """Saved record, or None when nothing has been saved yet."""
    raw = store.get_item(STORAGE_KEY)
    if raw is None:
        return None
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise StorageError(f"Saved record under {STORAGE_KEY} is not valid JSON") from e
    if not isinstance(data, dict):
        raise StorageError(f"Saved record under {STORAGE_KEY} is not a JSON object")
    return _record_fields(data)
