"""Pure rendering of the table state into display rows.

render_table() turns the active set, page, selection and editor state
into a TableView. The tkinter panel only copies a TableView into
widgets, so everything the operator sees is decided here.
"""

from __future__ import annotations

from collections.abc import Collection, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..models.constants import ACTION_EDIT, ACTION_SAVE
from ..utils.pagination import total_pages, visible_slice

if TYPE_CHECKING:
    from ..data.table_state import TableState
    from ..models.edit_buffer import EditBuffer
    from ..models.user_record import UserRecord


@dataclass(frozen=True)
class RenderedRow:
    """One visible row.

    Attributes:
        id: Record id.
        checked: Checkbox state (record is in the selection).
        editing: True if the cells are editable inputs.
        cells: (name, email, role) - buffer values when editing.
        action: "save" when editing, otherwise "edit".
    """

    id: int
    checked: bool
    editing: bool
    cells: tuple[str, str, str]
    action: str


@dataclass(frozen=True)
class TableView:
    """Everything needed to draw the table for one state."""

    rows: list[RenderedRow] = field(default_factory=list)
    page_index: int = 1
    total_pages: int = 1
    active_count: int = 0
    total_count: int = 0
    selected_count: int = 0
    header_checked: bool = False
    bulk_delete_enabled: bool = False


def render_row(
    record: UserRecord,
    selected_ids: Collection[int],
    edit_target: int | None,
    edit_buffer: EditBuffer | None = None,
) -> RenderedRow:
    """Render a single record."""
    editing = record.id == edit_target
    if editing and edit_buffer is not None and edit_buffer.record_id == record.id:
        cells = edit_buffer.values()
    else:
        cells = record.field_values()

    return RenderedRow(
        id=record.id,
        checked=record.id in selected_ids,
        editing=editing,
        cells=cells,
        action=ACTION_SAVE if editing else ACTION_EDIT,
    )


def render_table(
    active: Sequence[UserRecord],
    page_index: int,
    page_size: int,
    selected_ids: Collection[int],
    edit_target: int | None,
    edit_buffer: EditBuffer | None = None,
    total_count: int | None = None,
) -> TableView:
    """Render the current page of the active set.

    Args:
        active: The active set (search result or all records).
        page_index: 1-based page to show.
        page_size: Records per page.
        selected_ids: Ids of ticked records (across the whole store).
        edit_target: Id of the record being edited, or None.
        edit_buffer: In-progress values of the edit target.
        total_count: Number of records in the store (defaults to len(active)).

    Returns:
        TableView for the page.
    """
    if total_count is None:
        total_count = len(active)

    rows = [
        render_row(record, selected_ids, edit_target, edit_buffer)
        for record in visible_slice(active, page_index, page_size)
    ]
    selected_count = len(selected_ids)

    return TableView(
        rows=rows,
        page_index=page_index,
        total_pages=total_pages(len(active), page_size),
        active_count=len(active),
        total_count=total_count,
        selected_count=selected_count,
        header_checked=total_count > 0 and selected_count == total_count,
        bulk_delete_enabled=selected_count > 0,
    )


def render_state(state: TableState) -> TableView:
    """Render a TableState."""
    return render_table(
        state.active_records(),
        state.page_index,
        state.page_size,
        state.selected_ids,
        state.edit_target,
        state.edit_buffer,
        total_count=len(state.store),
    )
