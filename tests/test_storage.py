import json

import pytest

from budget_core.exceptions import PersistenceError
from budget_core.storage import JSONStorage


def test_save_and_load_round_trip(storage):
    storage.save("things.json", [{"id": 1}, {"id": 2}])
    assert storage.load("things.json") == [{"id": 1}, {"id": 2}]
    assert not (storage.base_path / "things.json.tmp").exists()


def test_missing_collection_is_empty(storage):
    assert storage.load("nothing.json") == []


def test_corrupted_collection_raises(storage):
    (storage.base_path / "expenses.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(PersistenceError):
        storage.load("expenses.json")
    with pytest.raises(PersistenceError):
        storage.ping()


def test_non_list_payload_raises(storage):
    (storage.base_path / "categories.json").write_text(json.dumps({"a": 1}), encoding="utf-8")
    with pytest.raises(PersistenceError):
        storage.load("categories.json")


def test_ping_succeeds_on_healthy_store(storage):
    storage.save("expenses.json", [])
    storage.ping()


@pytest.mark.parametrize("prefix", ["file://", ""])
def test_from_uri_accepts_file_scheme_and_bare_paths(tmp_path, prefix):
    target = tmp_path / "store"
    storage = JSONStorage.from_uri(f"{prefix}{target}")
    assert storage.base_path == target
    assert target.is_dir()


@pytest.mark.parametrize("uri", ["mongodb://localhost:27017/expense-tracker", "", "file://"])
def test_from_uri_rejects_unusable_uris(uri):
    with pytest.raises(PersistenceError):
        JSONStorage.from_uri(uri)


def test_unusable_directory_raises(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory", encoding="utf-8")
    with pytest.raises(PersistenceError):
        JSONStorage(blocker / "data")
