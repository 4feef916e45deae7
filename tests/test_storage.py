from __future__ import annotations

from block_blast.game import JsonFileStore, MemoryStore


def test_memory_store():
    store = MemoryStore({"a": "1"})
    assert store.get("a") == "1"
    store.set("b", "2")
    store.remove("a")
    store.remove("missing")
    assert store.get("a") is None
    assert store.data == {"b": "2"}


def test_json_file_store_persists_across_instances(tmp_path):
    path = str(tmp_path / "nested" / "store.json")
    JsonFileStore(path).set("key", '{"x": 1}')
    reopened = JsonFileStore(path)
    assert reopened.get("key") == '{"x": 1}'
    reopened.remove("key")
    assert JsonFileStore(path).get("key") is None


def test_json_file_store_missing_file_is_empty(tmp_path):
    assert JsonFileStore(str(tmp_path / "absent.json")).get("key") is None


def test_json_file_store_ignores_corrupt_file(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("[1, 2", encoding="utf-8")
    store = JsonFileStore(str(path))
    assert store.get("key") is None
    store.set("key", "value")
    assert store.get("key") == "value"


def test_json_file_store_ignores_non_object_top_level(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("[1, 2]", encoding="utf-8")
    assert JsonFileStore(str(path)).get("0") is None
