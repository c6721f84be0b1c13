"""Unit tests for UserRecord and EditBuffer."""

import pytest

from adminui.models.edit_buffer import EditBuffer
from adminui.models.user_record import UserRecord


class TestUserRecordFromDict:
    """Tests for UserRecord.from_dict()."""

    def test_string_id_is_converted(self):
        """The endpoint serves ids as numeric strings."""
        record = UserRecord.from_dict(
            {"id": "7", "name": "Aaron Miles", "email": "aaron@mailinator.com", "role": "member"}
        )
        assert record.id == 7
        assert record.name == "Aaron Miles"
        assert record.email == "aaron@mailinator.com"
        assert record.role == "member"
        assert record.selected is False

    def test_int_id(self):
        record = UserRecord.from_dict({"id": 3, "name": "A", "email": "a@x.com", "role": "admin"})
        assert record.id == 3

    @pytest.mark.parametrize("bad_id", [None, "abc", "", 1.5, True, [1]])
    def test_invalid_id_raises(self, bad_id):
        with pytest.raises(ValueError):
            UserRecord.from_dict({"id": bad_id, "name": "A", "email": "a@x.com", "role": "x"})

    def test_missing_field_raises(self):
        """A missing name/email/role is rejected."""
        with pytest.raises(ValueError, match="email"):
            UserRecord.from_dict({"id": 1, "name": "A", "role": "admin"})

    def test_non_string_field_raises(self):
        with pytest.raises(ValueError, match="role"):
            UserRecord.from_dict({"id": 1, "name": "A", "email": "a@x.com", "role": 5})

    def test_non_mapping_raises(self):
        with pytest.raises(ValueError):
            UserRecord.from_dict(["1", "A", "a@x.com", "admin"])


class TestUserRecordCopies:
    """Tests for the copy helpers on the frozen record."""

    def test_with_fields_keeps_id_and_selected(self):
        record = UserRecord(1, "Alice", "a@x.com", "admin", selected=True)

        updated = record.with_fields("Alicia", "alicia@x.com", "member")

        assert updated == UserRecord(1, "Alicia", "alicia@x.com", "member", selected=True)
        # Original unchanged
        assert record.name == "Alice"

    def test_with_selected_same_value_returns_same_instance(self):
        record = UserRecord(1, "Alice", "a@x.com", "admin")
        assert record.with_selected(False) is record

    def test_with_selected_changes_only_flag(self):
        record = UserRecord(1, "Alice", "a@x.com", "admin")
        selected = record.with_selected(True)
        assert selected.selected is True
        assert selected.field_values() == record.field_values()

    def test_records_are_frozen(self):
        record = UserRecord(1, "Alice", "a@x.com", "admin")
        with pytest.raises(AttributeError):
            record.name = "Bob"


class TestEditBuffer:
    """Tests for the transient edit buffer."""

    def test_from_record_copies_values(self):
        record = UserRecord(4, "Dana", "d@x.com", "member")
        buffer = EditBuffer.from_record(record)

        assert buffer.record_id == 4
        assert buffer.values() == ("Dana", "d@x.com", "member")
        assert buffer.has_changes(record) is False

    def test_set_field(self):
        record = UserRecord(4, "Dana", "d@x.com", "member")
        buffer = EditBuffer.from_record(record)

        buffer.set_field("name", "Danielle")

        assert buffer.name == "Danielle"
        assert buffer.has_changes(record) is True
        # Record untouched
        assert record.name == "Dana"

    @pytest.mark.parametrize("field_name", ["id", "selected", "record_id", "phone"])
    def test_non_editable_field_raises(self, field_name):
        buffer = EditBuffer(record_id=1)
        with pytest.raises(ValueError):
            buffer.set_field(field_name, "x")
