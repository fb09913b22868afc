from __future__ import annotations

import json
import os
import stat

import pytest

from friendreminder.store import StorageError, init_store, load_contacts, save_contacts


@pytest.fixture
def data_path(tmp_path):
    path = tmp_path / "data" / "friendContacts.json"
    init_store(path)
    return path


def test_init_creates_empty_array(data_path):
    assert data_path.read_text(encoding="utf-8") == "[]"
    assert load_contacts(data_path) == []


def test_init_leaves_existing_file_alone(data_path):
    data_path.write_text('[{"id": "1", "notes": []}]', encoding="utf-8")
    init_store(data_path)
    assert load_contacts(data_path) == [{"id": "1", "notes": []}]


def test_save_and_load_preserve_order(data_path):
    contacts = [
        {"id": "2", "name": "Bob", "notes": []},
        {"id": "1", "name": "Alice", "notes": [{"content": "hi", "date": "2025-01-01", "time": "08:00:00"}]},
    ]
    save_contacts(contacts, data_path)
    assert load_contacts(data_path) == contacts


def test_save_is_pretty_printed(data_path):
    save_contacts([{"id": "1", "notes": []}], data_path)
    text = data_path.read_text(encoding="utf-8")
    assert "\n  " in text
    assert json.loads(text) == [{"id": "1", "notes": []}]


def test_missing_or_mistyped_notes_normalized(data_path):
    data_path.write_text(
        json.dumps([{"id": "1"}, {"id": "2", "notes": None}, {"id": "3", "notes": "oops"}]),
        encoding="utf-8",
    )
    assert [c["notes"] for c in load_contacts(data_path)] == [[], [], []]


def test_malformed_json_raises(data_path):
    data_path.write_text("{not json", encoding="utf-8")
    with pytest.raises(StorageError):
        load_contacts(data_path)


@pytest.mark.parametrize("content", ['{"id": "1"}', '[1, 2]', '["a"]'])
def test_wrong_structure_raises(data_path, content):
    data_path.write_text(content, encoding="utf-8")
    with pytest.raises(StorageError):
        load_contacts(data_path)


def test_missing_file_raises(tmp_path):
    with pytest.raises(StorageError):
        load_contacts(tmp_path / "nope.json")


def test_write_failure_raises_and_keeps_old_contents(data_path):
    save_contacts([{"id": "1", "notes": []}], data_path)
    with pytest.raises(StorageError):
        save_contacts([{"id": "2", "notes": [], "bad": object()}], data_path)
    assert load_contacts(data_path) == [{"id": "1", "notes": []}]
    assert list(data_path.parent.glob("*.tmp")) == []


def test_write_to_missing_directory_raises(tmp_path):
    with pytest.raises(StorageError):
        save_contacts([], tmp_path / "missing" / "friendContacts.json")


@pytest.mark.skipif(os.name != "posix", reason="POSIX file modes")
def test_save_keeps_file_mode(data_path):
    data_path.chmod(0o644)
    save_contacts([{"id": "1", "notes": []}], data_path)
    assert stat.S_IMODE(data_path.stat().st_mode) == 0o644
