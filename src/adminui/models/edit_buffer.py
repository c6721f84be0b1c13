"""Transient buffer for the row currently being edited.

EditBuffer holds in-progress values for the editable fields of one
record. It is filled from the record when editing starts and read back
when the edit is saved, so nothing has to be recovered from the widgets.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .constants import EDITABLE_FIELDS

if TYPE_CHECKING:
    from .user_record import UserRecord


@dataclass
class EditBuffer:
    """Scratch values for name, email and role of a single record.

    Usage:
        buffer = EditBuffer.from_record(record)
        buffer.set_field("name", "Alicia")
        store.update(buffer.record_id, *buffer.values())
    """

    record_id: int
    name: str = ""
    email: str = ""
    role: str = ""

    @classmethod
    def from_record(cls, record: UserRecord) -> EditBuffer:
        """Create a buffer pre-filled with the record's current values."""
        return cls(
            record_id=record.id,
            name=record.name,
            email=record.email,
            role=record.role,
        )

    def set_field(self, field_name: str, value: str) -> None:
        """Set one editable field.

        Raises:
            ValueError: If field_name is not name, email or role.
        """
        if field_name not in EDITABLE_FIELDS:
            raise ValueError(f"Field {field_name!r} is not editable")
        setattr(self, field_name, value)

    def values(self) -> tuple[str, str, str]:
        """Get (name, email, role) in column order."""
        return (self.name, self.email, self.role)

    def has_changes(self, record: UserRecord) -> bool:
        """Check whether the buffer differs from the record."""
        return self.values() != record.field_values()
