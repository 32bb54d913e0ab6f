"""
Test Store Module
=================

Unit tests for the in-memory keyed store.
"""

import threading
import pytest
from pathlib import Path
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.store import MemoryStore
from core.exceptions import NotFoundError


@pytest.fixture
def store():
    return MemoryStore("patients", label="Patient")


class TestMemoryStore:
    """Tests for MemoryStore."""

    def test_put_get(self, store):
        store.put("patient_1", {"name": "Jane"})

        assert store.get("patient_1") == {"name": "Jane"}
        assert "patient_1" in store
        assert len(store) == 1

    def test_put_replaces(self, store):
        store.put("k", 1)
        store.put("k", 2)
        assert store.get("k") == 2
        assert len(store) == 1

    def test_get_unknown(self, store):
        with pytest.raises(NotFoundError) as exc_info:
            store.get("patient_404")

        assert exc_info.value.message == "Patient not found"
        assert exc_info.value.details == {"id": "patient_404"}
        assert exc_info.value.status_code == 404

    def test_find(self, store):
        store.put("k", "v")
        assert store.find("k") == "v"
        assert store.find("missing") is None

    def test_delete(self, store):
        store.put("k", "v")

        assert store.delete("k") == "v"
        assert "k" not in store

        with pytest.raises(NotFoundError):
            store.delete("k")

    def test_values_in_insertion_order(self, store):
        for key in ("a", "b", "c"):
            store.put(key, key.upper())

        assert store.values() == ["A", "B", "C"]
        assert list(store) == ["a", "b", "c"]

    def test_clear(self, store):
        store.put("k", "v")
        store.clear()
        assert len(store) == 0


class TestGenerateId:
    """Tests for id generation."""

    def test_format(self, store):
        key = store.generate_id("rec")
        prefix, stamp = key.split("_")
        assert prefix == "rec"
        assert stamp.isdigit()

    def test_unique_within_same_millisecond(self, store):
        ids = [store.generate_id("patient") for _ in range(200)]
        assert len(set(ids)) == 200

    def test_unique_across_threads(self, store):
        ids = []

        def worker():
            for _ in range(50):
                ids.append(store.generate_id("rec"))

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(set(ids)) == 200
