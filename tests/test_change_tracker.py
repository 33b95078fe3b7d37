"""
Unit tests for tracked records and the change tracker.
"""

import pytest

from sync import ChangeTracker, TrackedRecord


class TestTrackedRecord:
    """Tests for dirty detection on a single record."""

    def test_behaves_like_a_mapping(self):
        record = TrackedRecord({"id": 1, "name": "Ada"}, identity="id")

        assert dict(record) == {"id": 1, "name": "Ada"}
        assert len(record) == 2
        assert "name" in record
        assert record.get("missing") is None

    def test_metadata_stays_off_the_fields(self):
        record = TrackedRecord({"name": "Ada"}, identity="id", existing=True)

        assert list(record) == ["name"]
        assert record.existing is True

    def test_sanitized_drops_identity(self):
        record = TrackedRecord({"id": 1, "name": "Ada"}, identity="id")

        assert record.sanitized() == {"name": "Ada"}

    def test_modified_does_not_touch_snapshot(self):
        record = TrackedRecord({"id": 1, "name": "Ada"}, identity="id")

        record.modified()
        record.modified()

        assert record.original == {"id": 1, "name": "Ada"}

    def test_modified_is_idempotent(self):
        record = TrackedRecord({"name": "Ada"}, identity="id")
        record["name"] = "Grace"

        assert record.modified() is True
        assert record.modified() is True

    def test_key_order_does_not_matter(self):
        record = TrackedRecord({"first": 1, "second": 2}, identity="id")

        value = record.pop("first")
        record["first"] = value

        assert list(record) == ["second", "first"]
        assert record.modified() is False

    def test_nested_values_are_snapshotted_deeply(self):
        record = TrackedRecord({"tags": ["a"]}, identity="id")

        record["tags"].append("b")

        assert record.modified() is True

    def test_boolean_differs_from_number(self):
        record = TrackedRecord({"id": 1, "active": 1, "flags": [0]}, identity="id", existing=True)

        record["active"] = True
        assert record.modified() is True

        record["active"] = 1
        record["flags"] = [False]
        assert record.modified() is True

        record["flags"] = [0]
        assert record.modified() is False

    def test_nested_mapping_order_does_not_matter(self):
        record = TrackedRecord({"meta": {"a": 1, "b": 2}}, identity="id")

        record["meta"] = {"b": 2, "a": 1}

        assert record.modified() is False

    def test_edits_to_the_callers_dict_are_seen(self):
        fields = {"name": "Ada"}
        record = TrackedRecord(fields, identity="id")

        fields["name"] = "Grace"

        assert record["name"] == "Grace"
        assert record.modified() is True

    def test_removing_a_field_is_a_modification(self):
        record = TrackedRecord({"name": "Ada", "age": 36}, identity="id")

        del record["age"]

        assert record.modified() is True

    def test_mark_persisted_refreshes_snapshot(self):
        record = TrackedRecord({"name": "Ada"}, identity="id")
        record["name"] = "Grace"

        record.mark_persisted(record.sanitized())

        assert record.existing is True
        assert record.modified() is False

    def test_original_override(self):
        record = TrackedRecord({"name": "Grace"}, identity="id", existing=True, original={"name": "Ada"})

        assert record.modified() is True

    def test_records_with_equal_fields_are_distinct(self):
        first = TrackedRecord({"name": "Ada"}, identity="id")
        second = TrackedRecord({"name": "Ada"}, identity="id")

        assert first != second
        assert first == first


class TestChangeTracker:
    """Tests for tracked set ownership and classification."""

    def test_create_appends_in_order(self, tracker: ChangeTracker):
        first = tracker.create({"name": "Ada"})
        second = tracker.create({"name": "Grace"})

        assert tracker.records() == (first, second)
        assert tracker.tracked_items() == 2

    def test_create_defaults_to_new(self, tracker: ChangeTracker):
        record = tracker.create({"name": "Ada"})

        assert record.existing is False
        assert record.identity == "id"

    def test_clear(self, tracker: ChangeTracker):
        tracker.create({"name": "Ada"})

        tracker.clear()

        assert tracker.tracked_items() == 0

    def test_remove_matches_by_identity(self, tracker: ChangeTracker):
        first = tracker.create({"name": "Ada"})
        second = tracker.create({"name": "Ada"})

        assert tracker.remove(second) is True

        assert tracker.records() == (first,)
        assert tracker.records()[0] is first

    def test_remove_unknown_record(self, tracker: ChangeTracker):
        tracker.create({"name": "Ada"})

        assert tracker.remove(TrackedRecord({"name": "Ada"}, identity="id")) is False
        assert tracker.tracked_items() == 1

    def test_pending_sets(self, tracker: ChangeTracker):
        new = tracker.create({"name": "Ada"})
        changed = tracker.create({"id": 1, "name": "Grace"}, existing=True)
        tracker.create({"id": 2, "name": "Alan"}, existing=True)
        changed["name"] = "Grace H."

        assert tracker.pending_inserts() == [new]
        assert tracker.pending_updates() == [changed]

    def test_detect_changes(self, tracker: ChangeTracker):
        new = tracker.create({"name": "Ada"})
        changed = tracker.create({"id": 1, "name": "Grace"}, existing=True)
        unchanged = tracker.create({"id": 2, "name": "Alan"}, existing=True)
        changed["name"] = "Grace H."

        changes = tracker.detect_changes()

        assert changes["insert"] == [new]
        assert changes["update"] == [changed]
        assert changes["unchanged"] == [unchanged]

    @pytest.mark.parametrize("identity_value", [None, 0, ""])
    def test_identity_only_changes_are_unchanged(self, tracker: ChangeTracker, identity_value):
        record = tracker.create({"id": identity_value, "name": "Ada"}, existing=True)
        record["id"] = 10

        assert tracker.pending_updates() == []
