"""
Unit tests for seen-state persistence.
"""

import json

import pytest

from carousell_watch.components.seen_state import SeenStateStore
from carousell_watch.utils.error_handling import StateError


class TestSeenStateStore:
    """Test cases for SeenStateStore."""

    @pytest.fixture
    def store(self, tmp_path):
        return SeenStateStore(tmp_path / "seen.json")

    def test_missing_file_is_empty(self, store):
        assert store.load() == set()

    def test_save_writes_sorted_array(self, store):
        store.save({"B::https://x/p/2", "A::https://x/p/1"})

        assert json.loads(store.state_path.read_text(encoding="utf-8")) == [
            "A::https://x/p/1",
            "B::https://x/p/2",
        ]

    def test_round_trip(self, store):
        seen = {"A::https://x/p/1", "A::https://x/p/2"}

        store.save(seen)

        assert store.load() == seen

    def test_save_replaces_previous_contents(self, store):
        store.save({"A::https://x/p/1"})
        store.save({"A::https://x/p/2"})

        assert store.load() == {"A::https://x/p/2"}

    def test_save_creates_parent_directories(self, tmp_path):
        store = SeenStateStore(tmp_path / "state" / "nested" / "seen.json")

        store.save({"A::u"})

        assert store.load() == {"A::u"}

    def test_save_leaves_no_temp_files(self, store, tmp_path):
        store.save({"A::u"})

        assert [p.name for p in tmp_path.iterdir()] == ["seen.json"]

    def test_corrupt_file_raises(self, store):
        store.state_path.write_text("{not json", encoding="utf-8")

        with pytest.raises(StateError):
            store.load()

    @pytest.mark.parametrize("payload", ['{"A::u": true}', "[1, 2]", '"A::u"'])
    def test_wrong_shape_raises(self, store, payload):
        store.state_path.write_text(payload, encoding="utf-8")

        with pytest.raises(StateError, match="JSON array of strings"):
            store.load()

    def test_duplicates_in_file_collapse(self, store):
        store.state_path.write_text('["A::u", "A::u"]', encoding="utf-8")

        assert store.load() == {"A::u"}

    def test_add_is_idempotent(self):
        seen = set()

        SeenStateStore.add(seen, "A::u")
        SeenStateStore.add(seen, "A::u")

        assert seen == {"A::u"}
        assert SeenStateStore.has(seen, "A::u") is True
        assert SeenStateStore.has(seen, "B::u") is False

    def test_unwritable_location_raises(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("", encoding="utf-8")
        store = SeenStateStore(blocker / "seen.json")

        with pytest.raises(StateError, match="Could not save"):
            store.save({"A::u"})
