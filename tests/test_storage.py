"""Unit tests for persisted key-value storage."""

import json

import pytest

from jobscout.errors import StorageError
from jobscout.storage import FileStorage, MemoryStorage, read_json, remove_keys, write_json


class TestFileStorage:
    def test_missing_file_reads_as_empty(self, file_storage):
        assert file_storage.get("user_token") is None
        assert not file_storage.path.exists()

    def test_set_get(self, file_storage):
        file_storage.set("user_token", '"abc"')
        assert file_storage.get("user_token") == '"abc"'

    def test_values_survive_new_instance(self, file_storage):
        file_storage.set("saved_jobs", "[]")
        assert FileStorage(file_storage.path).get("saved_jobs") == "[]"

    def test_remove_many(self, file_storage):
        for key in ("a", "b", "c"):
            file_storage.set(key, "1")
        file_storage.remove(["a", "b", "missing"])
        assert file_storage.multi_get(["a", "b", "c"]) == {"a": None, "b": None, "c": "1"}

    def test_document_is_json_object(self, file_storage):
        file_storage.set("k", "v")
        assert json.loads(file_storage.path.read_text(encoding="utf-8")) == {"k": "v"}

    def test_corrupt_document_raises_on_read(self, file_storage):
        file_storage.path.write_text("{not json", encoding="utf-8")
        with pytest.raises(StorageError):
            file_storage.get("k")

    def test_invalid_utf8_raises_storage_error(self, file_storage):
        file_storage.path.write_bytes(b'{"saved_jobs": "\xff\xfe"}')
        with pytest.raises(StorageError):
            file_storage.get("saved_jobs")
        with pytest.raises(StorageError):
            file_storage.multi_get(["saved_jobs"])

    def test_write_replaces_corrupt_document(self, file_storage):
        file_storage.path.write_text("{not json", encoding="utf-8")

        file_storage.set("k", "v")

        assert file_storage.get("k") == "v"
        backup = file_storage.path.with_name("storage.json.corrupt")
        assert backup.read_text(encoding="utf-8") == "{not json"

    def test_write_replaces_invalid_utf8(self, file_storage):
        file_storage.path.write_bytes(b"\xff\xfe")
        file_storage.remove(["k"])
        assert json.loads(file_storage.path.read_text(encoding="utf-8")) == {}

    def test_non_object_document(self, file_storage):
        file_storage.path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(StorageError):
            file_storage.get("k")

    def test_creates_parent_directories(self, tmp_path):
        storage = FileStorage(tmp_path / "nested" / "dir" / "storage.json")
        storage.set("k", "v")
        assert storage.get("k") == "v"


class TestJsonHelpers:
    def test_round_trip(self):
        storage = MemoryStorage()
        assert write_json(storage, "settings", {"theme": "dark"}) is True
        assert read_json(storage, "settings", {}) == {"theme": "dark"}

    def test_missing_is_default(self):
        assert read_json(MemoryStorage(), "nope", []) == []

    def test_malformed_is_default(self):
        storage = MemoryStorage({"saved_jobs": "[{broken"})
        assert read_json(storage, "saved_jobs", []) == []

    def test_unreadable_backend_is_default(self, file_storage):
        file_storage.path.write_text("garbage", encoding="utf-8")
        assert read_json(file_storage, "saved_jobs", "fallback") == "fallback"

    def test_failed_write_reports_false(self, failing_storage):
        assert write_json(failing_storage, "k", [1]) is False
        assert remove_keys(failing_storage, ["k"]) is False

    def test_invalid_utf8_is_default(self, file_storage):
        file_storage.path.write_bytes(b'{"saved_jobs": "\xff\xfe"}')
        assert read_json(file_storage, "saved_jobs", []) == []
