"""
Tests for ResourceStore and PacketHistory
"""

import pytest

from gulp.errors import StoreError
from gulp.store import PacketHistory, ResourceStore


class TestResourceStore:
    """Open, read, insert."""

    def test_closed_store_raises(self):
        with pytest.raises(StoreError, match="not open"):
            ResourceStore().read_partition("servers")

    def test_open_creates_parent(self, tmp_path):
        store = ResourceStore()
        path = tmp_path / "a" / "b" / "resources.sqlite3"
        store.open_at(path)
        try:
            assert store.is_open
            assert path.exists()
        finally:
            store.close()
        assert not store.is_open

    def test_open_twice_raises(self, store, tmp_path):
        with pytest.raises(StoreError, match="already open"):
            store.open_at(tmp_path / "other.sqlite3")

    def test_insert_and_read(self, store):
        first = store.insert("servers", host="a.com", port=80)
        store.insert("servers", host="b.com", port=443, encoder="https")
        rows = store.read_partition("servers")
        assert [r["host"] for r in rows] == ["a.com", "b.com"]
        assert rows[0]["id"] == first
        assert rows[0]["encoder"] == "http"

    def test_unknown_partition(self, store):
        with pytest.raises(StoreError, match="Unknown partition"):
            store.read_partition("cookies")

    def test_unknown_column(self, store):
        with pytest.raises(StoreError, match="Unknown columns"):
            store.insert("servers", host="a", port=1, colour="red")


class TestPacketHistory:
    """In-memory packet collection."""

    def test_primed_empty(self, store):
        """restore=False ignores stored packets."""
        store.insert("packets", method="GET", url="http://x/")
        history = PacketHistory(store, restore=False)
        assert len(history) == 0
        assert history.restored is False

    def test_restore(self, store):
        store.insert("packets", method="GET", url="http://x/")
        history = PacketHistory(store, restore=True)
        assert len(history) == 1
        assert history.recent()[0]["url"] == "http://x/"

    def test_restore_without_store(self):
        with pytest.raises(StoreError):
            PacketHistory(None, restore=True)

    def test_recent(self):
        history = PacketHistory(capacity=3)
        for i in range(5):
            history.append({"n": i})
        assert [p["n"] for p in history.recent(2)] == [3, 4]
        assert len(history) == 3
