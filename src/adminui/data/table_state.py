"""Interaction state for the admin table.

TableState combines the search query, the current page, row selection
and the row editor on top of a UserStore. Every user action goes
through a single transition function that:

1. closes the editor (discarding its buffer) for selection actions,
2. applies the action,
3. drops an edit target whose record has disappeared,
4. clamps the page into range for the (possibly smaller) active set,
5. notifies listeners once.

The active set and the visible page are recomputed from the store on
every read; nothing derived is cached.

Row editor states:
    Idle            edit_target is None
    Editing(id)     edit_target == id, edit_buffer holds in-progress values

    start_edit(id)      Idle | Editing(*) -> Editing(id)  (old buffer dropped)
    save_edit()         Editing(id) -> Idle               (buffer committed)
    toggle_one/all      Editing(*) -> Idle                (buffer dropped)
"""

from __future__ import annotations

from collections.abc import Callable

from ..models.constants import PAGE_SIZE
from ..models.edit_buffer import EditBuffer
from ..models.user_record import UserRecord
from ..utils.debug_trace import logger
from ..utils.filters import FilterBase, RegexFilter
from ..utils.pagination import clamp_page, total_pages, visible_slice
from .user_store import UserStore


class TableState:
    """Search, pagination, selection and edit state over a UserStore.

    Usage:
        state = TableState(store)
        state.set_query("bob")
        state.start_edit(2)
        state.set_buffer_field("name", "Robert")
        state.save_edit()
        state.toggle_all(True)
        state.delete_selected()
    """

    def __init__(
        self,
        store: UserStore,
        page_size: int = PAGE_SIZE,
        search_filter: FilterBase | None = None,
    ):
        """Initialize the table state.

        Args:
            store: The record store to operate on.
            page_size: Records per page.
            search_filter: Search strategy (defaults to RegexFilter).
        """
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")

        self._store = store
        self._page_size = page_size
        self._filter = search_filter or RegexFilter()

        self._query = ""
        self._page_index = 1
        self._edit_buffer: EditBuffer | None = None

        # Listener callbacks - called after every state change
        self._listeners: list[Callable[[], None]] = []

        # Store changes made inside a transition are reconciled by the transition
        self._in_transition = False
        store.add_observer(self._on_store_changed)

    # --- Read access ---

    @property
    def store(self) -> UserStore:
        return self._store

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def query(self) -> str:
        return self._query

    @property
    def page_index(self) -> int:
        return self._page_index

    @property
    def edit_target(self) -> int | None:
        """Id of the record being edited, or None when idle."""
        return self._edit_buffer.record_id if self._edit_buffer else None

    @property
    def edit_buffer(self) -> EditBuffer | None:
        """Transient values of the record being edited, or None when idle."""
        return self._edit_buffer

    @property
    def is_editing(self) -> bool:
        return self._edit_buffer is not None

    @property
    def selected_ids(self) -> set[int]:
        return self._store.selected_ids

    @property
    def can_delete_selected(self) -> bool:
        return bool(self._store.selected_ids)

    def active_records(self) -> list[UserRecord]:
        """Records governing pagination: the search result, or everything."""
        records = self._store.records
        if not self._query:
            return records
        return self._filter.filter_matches(records, self._query)

    def visible_records(self) -> list[UserRecord]:
        """Records on the current page."""
        return visible_slice(self.active_records(), self._page_index, self._page_size)

    def total_pages(self) -> int:
        return total_pages(len(self.active_records()), self._page_size)

    # --- Listeners ---

    def add_listener(self, callback: Callable[[], None]) -> None:
        """Add a callback run after each state change."""
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[], None]) -> None:
        """Remove a listener callback."""
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify_listeners(self) -> None:
        for callback in self._listeners:
            try:
                callback()
            except Exception:
                logger.exception(f"Table listener {callback!r} failed")

    # --- Transition ---

    def _reconcile(self) -> None:
        """Restore invariants after the store or query changed."""
        if self._edit_buffer and self._edit_buffer.record_id not in self._store:
            logger.debug(f"Edit target {self._edit_buffer.record_id} was deleted; editor closed")
            self._edit_buffer = None

        clamped = clamp_page(self._page_index, len(self.active_records()), self._page_size)
        if clamped != self._page_index:
            logger.debug(f"Page {self._page_index} out of range; moved to page {clamped}")
            self._page_index = clamped

    def _transition(
        self,
        action: str,
        apply: Callable[[], None],
        closes_editor: bool = False,
    ) -> None:
        """Run one user action and restore invariants.

        Args:
            action: Action name for the debug log.
            apply: Performs the action's own mutation.
            closes_editor: If True, discard any open edit before applying.
        """
        self._in_transition = True
        try:
            if closes_editor and self._edit_buffer is not None:
                logger.debug(f"{action}: discarding edit of record {self._edit_buffer.record_id}")
                self._edit_buffer = None
            apply()
            self._reconcile()
        finally:
            self._in_transition = False

        logger.debug(
            f"{action}: page {self._page_index}/{self.total_pages()}, "
            f"editing={self.edit_target}, selected={len(self._store.selected_ids)}"
        )
        self._notify_listeners()

    def _on_store_changed(self, store: UserStore, affected_ids: set[int] | None) -> None:
        """Handle store mutations made outside a transition (e.g. initial load)."""
        if self._in_transition:
            return
        self._reconcile()
        self._notify_listeners()

    # --- Search & pagination ---

    def set_query(self, query: str) -> None:
        """Change the search query and go back to page 1."""
        if query == self._query:
            return

        def apply() -> None:
            self._query = query
            self._page_index = 1

        self._transition("search", apply)

    def go_to_page(self, page_index: int) -> bool:
        """Show another page.

        Returns:
            False (and changes nothing) if page_index is out of range.
        """
        if not 1 <= page_index <= self.total_pages():
            logger.debug(f"Ignoring request for page {page_index}")
            return False

        def apply() -> None:
            self._page_index = page_index

        self._transition("paginate", apply)
        return True

    # --- Row editor ---

    def start_edit(self, record_id: int) -> bool:
        """Open the editor on a record, dropping any edit in progress.

        Returns:
            False if the record does not exist.
        """
        record = self._store.get(record_id)
        if record is None:
            return False

        def apply() -> None:
            self._edit_buffer = EditBuffer.from_record(record)

        self._transition("edit", apply)
        return True

    def set_buffer_field(self, field_name: str, value: str) -> None:
        """Write an in-progress value for the record being edited.

        Does nothing while idle. Listeners are not notified; the buffer
        only reaches the store on save.

        Raises:
            ValueError: If field_name is not name, email or role.
        """
        if self._edit_buffer is None:
            return
        self._edit_buffer.set_field(field_name, value)

    def save_edit(self) -> bool:
        """Commit the edit buffer to the store and close the editor.

        Returns:
            False if no edit was open.
        """
        buffer = self._edit_buffer
        if buffer is None:
            return False

        def apply() -> None:
            record = self._store.get(buffer.record_id)
            if record is not None and not buffer.has_changes(record):
                logger.debug(f"Record {buffer.record_id} unchanged; nothing to save")
            elif self._store.update(buffer.record_id, *buffer.values()):
                logger.info(f"Saved record {buffer.record_id}")
            self._edit_buffer = None

        self._transition("save", apply)
        return True

    # --- Deletion ---

    def delete(self, record_id: int) -> bool:
        """Delete one record.

        Returns:
            True if the record existed.
        """
        if record_id not in self._store:
            return False

        self._transition("delete", lambda: self._store.remove(record_id))
        return True

    def delete_selected(self) -> set[int]:
        """Delete every selected record.

        Returns:
            The ids that were deleted.
        """
        selected = self._store.selected_ids
        if not selected:
            return set()

        removed: set[int] = set()

        def apply() -> None:
            removed.update(self._store.remove_many(selected))

        self._transition("delete selected", apply)
        return removed

    # --- Selection ---

    def toggle_all(self, checked: bool) -> None:
        """Tick or untick every record in the store (not just this page)."""
        self._transition(
            "select all",
            lambda: self._store.set_all_selected(checked),
            closes_editor=True,
        )

    def toggle_one(self, record_id: int, checked: bool) -> None:
        """Tick or untick a single record."""
        self._transition(
            "select",
            lambda: self._store.set_selected(record_id, checked),
            closes_editor=True,
        )
