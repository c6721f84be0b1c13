"""In-memory store holding every member record.

The store is the single source of truth for the table. Records are
immutable; every mutation swaps in a replacement via dataclasses.replace
and notifies observers with the set of affected ids.

Selection is kept on the records themselves (the ``selected`` flag), so
the set of selected ids is always a subset of the stored ids: removing a
record removes its selection with it.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from ..models.user_record import UserRecord
from ..utils.debug_trace import logger

Observer = Callable[["UserStore", "set[int] | None"], None]


class UserStore:
    """Ordered collection of UserRecord keyed by id.

    Usage:
        store = UserStore()
        store.load(data_source.load_all_users())

        store.update(1, "Alicia", "a@x.com", "admin")
        store.set_selected(2, True)
        store.remove_many(store.selected_ids)
    """

    def __init__(self):
        # Insertion order is display order
        self._records: dict[int, UserRecord] = {}

        # Observer callbacks - called with set of affected ids (None = everything)
        self._observers: list[Observer] = []

    # --- Observers ---

    def add_observer(self, callback: Observer) -> None:
        """Add an observer callback."""
        if callback not in self._observers:
            self._observers.append(callback)

    def remove_observer(self, callback: Observer) -> None:
        """Remove an observer callback."""
        if callback in self._observers:
            self._observers.remove(callback)

    def _notify_observers(self, affected_ids: set[int] | None = None) -> None:
        """Notify all observers of data changes."""
        for callback in self._observers:
            try:
                callback(self, affected_ids)
            except Exception:
                # One broken observer must not starve the others
                logger.exception(f"Store observer {callback!r} failed")

    # --- Read access ---

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records

    @property
    def records(self) -> list[UserRecord]:
        """All records in load order."""
        return list(self._records.values())

    @property
    def ids(self) -> list[int]:
        """All ids in load order."""
        return list(self._records)

    @property
    def selected_ids(self) -> set[int]:
        """Ids of records whose checkbox is ticked."""
        return {record_id for record_id, record in self._records.items() if record.selected}

    def get(self, record_id: int) -> UserRecord | None:
        """Get a record by id, or None if it does not exist."""
        return self._records.get(record_id)

    # --- Mutation ---

    def load(self, records: Iterable[UserRecord]) -> None:
        """Replace the full record set.

        Raises:
            ValueError: If two records share an id.
        """
        loaded: dict[int, UserRecord] = {}
        for record in records:
            if record.id in loaded:
                raise ValueError(f"Duplicate record id {record.id}")
            loaded[record.id] = record

        self._records = loaded
        logger.debug(f"Store loaded with {len(loaded)} records")
        self._notify_observers(None)

    def update(self, record_id: int, name: str, email: str, role: str) -> bool:
        """Replace name, email and role of one record.

        Unknown ids are ignored.

        Returns:
            True if the record exists (whether or not a value changed).
        """
        record = self._records.get(record_id)
        if record is None:
            logger.debug(f"Update ignored: record {record_id} no longer exists")
            return False

        updated = record.with_fields(name, email, role)
        if updated != record:
            self._records[record_id] = updated
            self._notify_observers({record_id})
        return True

    def remove(self, record_id: int) -> bool:
        """Delete one record (and its selection).

        Returns:
            True if a record was deleted.
        """
        if self._records.pop(record_id, None) is None:
            return False

        logger.debug(f"Removed record {record_id}")
        self._notify_observers({record_id})
        return True

    def remove_many(self, record_ids: Iterable[int]) -> set[int]:
        """Delete every listed record that exists.

        Returns:
            The ids that were actually deleted.
        """
        removed = {record_id for record_id in set(record_ids) if record_id in self._records}
        if not removed:
            return removed

        self._records = {
            record_id: record
            for record_id, record in self._records.items()
            if record_id not in removed
        }
        logger.debug(f"Removed {len(removed)} records")
        self._notify_observers(removed)
        return removed

    def set_selected(self, record_id: int, selected: bool) -> bool:
        """Tick or untick one record.

        Returns:
            True if the record exists.
        """
        record = self._records.get(record_id)
        if record is None:
            return False

        updated = record.with_selected(selected)
        if updated is not record:
            self._records[record_id] = updated
            self._notify_observers({record_id})
        return True

    def set_all_selected(self, selected: bool) -> None:
        """Tick or untick every record in the store."""
        affected: set[int] = set()
        for record_id, record in self._records.items():
            updated = record.with_selected(selected)
            if updated is not record:
                self._records[record_id] = updated
                affected.add(record_id)

        if affected:
            self._notify_observers(affected)
