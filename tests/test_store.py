"""Tests for the in-memory and JSON-file stores."""

from __future__ import annotations

import json
import threading

import pytest

from life_engine.exceptions import StorageError
from life_engine.store import JsonFileStore, MemoryStore, StoreKey


class TestMemoryStore:
    def test_values_are_copied(self) -> None:
        store = MemoryStore()
        value = [1, 2]
        store.set("k", value)
        value.append(3)
        assert store.get("k") == [1, 2]

    def test_default_for_missing_key(self) -> None:
        assert MemoryStore().get("missing", 7) == 7

    def test_typed_getters_fall_back(self) -> None:
        store = MemoryStore({"i": "x", "f": "y", "l": {"a": 1}})
        assert store.get_int("i", 3) == 3
        assert store.get_float("f", 1.5) == 1.5
        assert store.get_list("l") == []

    def test_delete(self) -> None:
        store = MemoryStore({"k": 1})
        store.delete("k")
        assert store.get("k") is None


class TestJsonFileStore:
    def test_missing_file_starts_empty(self, tmp_path) -> None:
        store = JsonFileStore(tmp_path / "store.json")
        assert store.get(StoreKey.POINTS) is None

    def test_round_trips_through_disk(self, tmp_path) -> None:
        path = tmp_path / "nested" / "store.json"
        JsonFileStore(path).set(StoreKey.POINTS, 42)
        assert json.loads(path.read_text())[StoreKey.POINTS] == 42
        assert JsonFileStore(path).get_int(StoreKey.POINTS) == 42

    def test_keys_written_independently(self, tmp_path) -> None:
        path = tmp_path / "store.json"
        store = JsonFileStore(path)
        store.set(StoreKey.THEME, "dark")
        store.set(StoreKey.POINTS, 5)
        data = json.loads(path.read_text())
        assert data == {StoreKey.THEME: "dark", StoreKey.POINTS: 5}

    def test_corrupt_file_raises(self, tmp_path) -> None:
        path = tmp_path / "store.json"
        path.write_text("{not json")
        with pytest.raises(StorageError):
            JsonFileStore(path)

    def test_non_object_document_raises(self, tmp_path) -> None:
        path = tmp_path / "store.json"
        path.write_text("[1, 2]")
        with pytest.raises(StorageError):
            JsonFileStore(path)

    def test_write_failure_keeps_memory_value(self, tmp_path, monkeypatch) -> None:
        store = JsonFileStore(tmp_path / "store.json")

        def boom(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr("life_engine.store.os.replace", boom)
        with pytest.raises(StorageError) as exc_info:
            store.set(StoreKey.POINTS, 10)
        assert exc_info.value.key == StoreKey.POINTS
        assert store.get(StoreKey.POINTS) == 10


# ---------------------------------------------------------------------------
# Concurrent writers
# ---------------------------------------------------------------------------


class TestConcurrentWrites:
    def _hammer(self, store, keys: list[str], writes: int = 200) -> list[Exception]:
        errors: list[Exception] = []

        def writer(key: str) -> None:
            for i in range(writes):
                try:
                    store.set(key, [i])
                except Exception as exc:  # collected for the assertion below
                    errors.append(exc)

        threads = [threading.Thread(target=writer, args=(k,)) for k in keys]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        return errors

    def test_json_store_threads_never_collide(self, tmp_path) -> None:
        path = tmp_path / "store.json"
        keys = [StoreKey.POINTS, StoreKey.STUDY_HOURS, StoreKey.DAILY_NUTRITION]
        store = JsonFileStore(path)
        assert self._hammer(store, keys) == []
        on_disk = json.loads(path.read_text())
        assert all(on_disk[k] == [199] for k in keys)
        assert not (tmp_path / "store.json.tmp").exists()

    def test_memory_store_threads(self) -> None:
        store = MemoryStore()
        keys = [f"k{i}" for i in range(4)]
        assert self._hammer(store, keys) == []
        assert store.snapshot() == {k: [199] for k in keys}
