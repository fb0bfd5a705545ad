import json

import pytest

from id_card_ocr.errors import StorageError
from id_card_ocr.storage import STORAGE_KEY, KeyValueStore, load_record, save_record


def test_set_and_get_item(tmp_path) -> None:
    store = KeyValueStore(tmp_path / "store.json")
    assert store.get_item("missing") is None
    store.set_item("greeting", "hello")
    assert store.get_item("greeting") == "hello"
    assert KeyValueStore(tmp_path / "store.json").get_item("greeting") == "hello"


def test_remove_item(tmp_path) -> None:
    store = KeyValueStore(tmp_path / "store.json")
    store.set_item("a", "1")
    store.remove_item("a")
    store.remove_item("never-set")
    assert store.get_item("a") is None


def test_values_must_be_strings(tmp_path) -> None:
    store = KeyValueStore(tmp_path / "store.json")
    with pytest.raises(TypeError):
        store.set_item("a", 1)


def test_save_record_keeps_only_record_fields(tmp_path) -> None:
    store = KeyValueStore(tmp_path / "store.json")
    saved = save_record(store, {
        "name": "KUMAR",
        "idNumber": "ABCDE1234F",
        "confidence": {"name": 0.95},
    })
    assert saved == {"name": "KUMAR", "idNumber": "ABCDE1234F", "dob": ""}
    assert json.loads(store.get_item(STORAGE_KEY)) == saved


def test_load_record_round_trip(tmp_path) -> None:
    store = KeyValueStore(tmp_path / "store.json")
    assert load_record(store) is None
    save_record(store, {"name": "Jane", "idNumber": "", "dob": "1990-05-15"})
    assert load_record(store) == {"name": "Jane", "idNumber": "", "dob": "1990-05-15"}


def test_corrupt_store_raises(tmp_path) -> None:
    path = tmp_path / "store.json"
    path.write_text("not json", encoding="utf-8")
    with pytest.raises(StorageError):
        KeyValueStore(path).get_item(STORAGE_KEY)


def test_corrupt_record_raises(tmp_path) -> None:
    store = KeyValueStore(tmp_path / "store.json")
    store.set_item(STORAGE_KEY, "[1, 2]")
    with pytest.raises(StorageError):
        load_record(store)
