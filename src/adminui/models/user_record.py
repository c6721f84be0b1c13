"""Immutable user record displayed in the admin table.

Records are frozen dataclasses. The store swaps in a new instance (via
dataclasses.replace) whenever a field changes, so a row handed to a view
never changes underneath it.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from .constants import EDITABLE_FIELDS


@dataclass(frozen=True)
class UserRecord:
    """A single member row.

    Attributes:
        id: Unique, immutable identifier.
        name: Display name.
        email: Email address.
        role: Role label (e.g. "admin", "member").
        selected: Whether the row's checkbox is ticked.
    """

    id: int
    name: str = ""
    email: str = ""
    role: str = ""
    selected: bool = False

    @classmethod
    def from_dict(cls, data: Any) -> UserRecord:
        """Build a record from one object of the JSON payload.

        The public endpoint serves ids as numeric strings ("1"), so both
        ints and digit-only strings are accepted.

        Args:
            data: Mapping with id, name, email and role keys.

        Returns:
            New unselected UserRecord.

        Raises:
            ValueError: If the object is missing a field or a field has the
                wrong type.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Expected an object, got {type(data).__name__}")

        raw_id = data.get("id")
        if isinstance(raw_id, bool):
            raise ValueError(f"Invalid id: {raw_id!r}")
        if isinstance(raw_id, int):
            record_id = raw_id
        elif isinstance(raw_id, str) and raw_id.strip().isdigit():
            record_id = int(raw_id.strip())
        else:
            raise ValueError(f"Invalid id: {raw_id!r}")

        values = {}
        for field_name in EDITABLE_FIELDS:
            value = data.get(field_name)
            if not isinstance(value, str):
                raise ValueError(f"Record {record_id}: field {field_name!r} must be a string")
            values[field_name] = value

        return cls(id=record_id, **values)

    def with_fields(self, name: str, email: str, role: str) -> UserRecord:
        """Return a copy with the editable fields replaced (id and selected kept)."""
        return replace(self, name=name, email=email, role=role)

    def with_selected(self, selected: bool) -> UserRecord:
        """Return a copy with the selected flag set."""
        if self.selected == selected:
            return self
        return replace(self, selected=selected)

    def field_values(self) -> tuple[str, str, str]:
        """Get (name, email, role) in column order."""
        return (self.name, self.email, self.role)
