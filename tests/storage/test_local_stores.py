from __future__ import annotations

import json

import pytest

from src.campus_attendance.campus_attendance.core.exceptions import NotFoundError, ValidationError
from src.campus_attendance.campus_attendance.storage.kv_store import JsonFileKeyValueStore
from src.campus_attendance.campus_attendance.storage.object_storage import LocalObjectStorage


def test_json_store_persists_across_instances(tmp_path):
    path = tmp_path / "state" / "store.json"
    JsonFileKeyValueStore(path).set("catalog.years", {"payload": [], "fetched_at": 5})

    reopened = JsonFileKeyValueStore(path)

    assert reopened.get("catalog.years") == {"payload": [], "fetched_at": 5}
    assert json.loads(path.read_text(encoding="utf-8"))["catalog.years"]["fetched_at"] == 5


def test_json_store_remove_and_missing_keys(tmp_path):
    store = JsonFileKeyValueStore(tmp_path / "store.json")
    store.set("a", 1)
    store.remove("a")
    store.remove("never-set")

    assert store.get("a") is None


def test_object_storage_upload_list_and_url(tmp_path):
    storage = LocalObjectStorage(tmp_path, base_url="/files/")

    stored = storage.upload_bytes("Data Structures/week1.pdf", b"%PDF")

    assert stored.path == "Data Structures/week1.pdf"
    assert [o.name for o in storage.list_children("Data Structures")] == ["week1.pdf"]
    assert storage.download_url(stored.path) == "/files/Data%20Structures/week1.pdf"
    assert storage.list_children("Nothing Here") == []


@pytest.mark.parametrize("path", ["../escape.txt", "a/../../b.txt", "/"])
def test_object_storage_rejects_unsafe_paths(tmp_path, path):
    with pytest.raises(ValidationError):
        LocalObjectStorage(tmp_path).upload_bytes(path, b"x")


def test_download_url_for_missing_file(tmp_path):
    with pytest.raises(NotFoundError):
        LocalObjectStorage(tmp_path).download_url("missing.pdf")
