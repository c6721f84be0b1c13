"""Panel widget showing one page of member records.

Uses tksheet for the table. The panel holds no table logic of its own:
user input is forwarded to TableState, and every state change redraws
the sheet from render_state().
"""

from __future__ import annotations

import tkinter as tk
from tkinter import ttk
from typing import TYPE_CHECKING

from tksheet import Sheet

from ..models.constants import ACTION_SAVE, EDITABLE_FIELDS, PAGER_WIDTH
from ..utils.debug_trace import logger, perf_timer
from ..utils.pagination import page_window
from .render import TableView, render_state

if TYPE_CHECKING:
    from ..data.table_state import TableState

# Column indices
COL_CHECK = 0
COL_NAME = 1
COL_EMAIL = 2
COL_ROLE = 3
COL_ACTION = 4
COL_DELETE = 5

NUM_COLUMNS = 6

# Sheet column -> editable record field
COL_TO_FIELD = {
    COL_NAME: EDITABLE_FIELDS[0],
    COL_EMAIL: EDITABLE_FIELDS[1],
    COL_ROLE: EDITABLE_FIELDS[2],
}

CHECKED_MARK = "☑"
UNCHECKED_MARK = "☐"

COLOR_SELECTED_BG = "#e8f0fe"
COLOR_EDITING_BG = "#fff8d6"
COLOR_DELETE_FG = "#c62828"


class TablePanel(ttk.Frame):
    """Search box, member table, pager and bulk delete button.

    Columns: checkbox, Name, Email, Role, Edit/Save, Delete.
    Only the row being edited accepts cell edits; they go to the
    state's edit buffer and reach the store when Save is clicked.
    """

    def _on_search_changed(self) -> None:
        self.table_state.set_query(self.search_var.get())

    def _on_select_all(self) -> None:
        self.table_state.toggle_all(self.select_all_var.get())

    def _on_delete_selected(self) -> None:
        removed = self.table_state.delete_selected()
        if removed:
            logger.info(f"Deleted {len(removed)} selected records")

    def _row_id(self, display_row: int | None) -> int | None:
        """Record id shown on a sheet row, or None."""
        if display_row is None or not 0 <= display_row < len(self._view.rows):
            return None
        return self._view.rows[display_row].id

    def _on_click(self, event) -> None:
        """Dispatch clicks on the checkbox, edit/save and delete columns."""
        if self.sheet.identify_region(event) != "table":
            return

        display_row = self.sheet.identify_row(event)
        column = self.sheet.identify_column(event)
        if self._row_id(display_row) is None or column is None:
            return

        rendered = self._view.rows[display_row]

        if column == COL_CHECK:
            self.table_state.toggle_one(rendered.id, not rendered.checked)
        elif column == COL_ACTION:
            if rendered.action == ACTION_SAVE:
                self.table_state.save_edit()
            else:
                self.table_state.start_edit(rendered.id)
        elif column == COL_DELETE:
            self.table_state.delete(rendered.id)

    def _validate_edit(self, event) -> str | None:
        """Allow cell edits only on the row being edited.

        Returns:
            The new value, or None to reject the edit.
        """
        row = getattr(event, "row", None)
        column = getattr(event, "column", None)
        if column not in COL_TO_FIELD:
            return None
        record_id = self._row_id(row)
        if record_id is None or record_id != self.table_state.edit_target:
            return None
        return event.value if event.value is not None else ""

    def _on_sheet_modified(self, event) -> None:
        """Copy edited cells of the edit target into the edit buffer."""
        if self._suppress_notifications:
            return

        cells = getattr(event, "cells", None)
        if not cells:
            return

        table_cells = cells.get("table", {})
        for (row_idx, col), _old_value in table_cells.items():
            field_name = COL_TO_FIELD.get(col)
            if field_name is None or self._row_id(row_idx) != self.table_state.edit_target:
                continue
            new_value = self.sheet.get_cell_data(row_idx, col)
            self.table_state.set_buffer_field(field_name, new_value or "")

    def _go_to_page(self, page_index: int) -> None:
        self.table_state.go_to_page(page_index)

    def _rebuild_pager(self, view: TableView) -> None:
        """Recreate first/numbered/last buttons for the current page."""
        for child in self.pager_frame.winfo_children():
            child.destroy()

        at_first = view.page_index <= 1
        at_last = view.page_index >= view.total_pages

        ttk.Button(
            self.pager_frame,
            text="«",
            width=3,
            command=lambda: self._go_to_page(1),
            state=tk.DISABLED if at_first else tk.NORMAL,
        ).pack(side=tk.LEFT, padx=1)

        for page in page_window(view.page_index, view.total_pages, PAGER_WIDTH):
            ttk.Button(
                self.pager_frame,
                text=str(page),
                width=3,
                command=lambda p=page: self._go_to_page(p),
                state=tk.DISABLED if page == view.page_index else tk.NORMAL,
            ).pack(side=tk.LEFT, padx=1)

        ttk.Button(
            self.pager_frame,
            text="»",
            width=3,
            command=lambda: self._go_to_page(view.total_pages),
            state=tk.DISABLED if at_last else tk.NORMAL,
        ).pack(side=tk.LEFT, padx=1)

    def _apply_row_styling(self, view: TableView) -> None:
        """Highlight selected rows and the row being edited."""
        self.sheet.dehighlight_all()
        for row_idx, row in enumerate(view.rows):
            if row.editing:
                bg = COLOR_EDITING_BG
            elif row.checked:
                bg = COLOR_SELECTED_BG
            else:
                bg = None
            for col in range(NUM_COLUMNS):
                fg = COLOR_DELETE_FG if col == COL_DELETE else None
                if bg or fg:
                    self.sheet.highlight_cells(row=row_idx, column=col, bg=bg, fg=fg)

    def _update_status(self, view: TableView) -> None:
        if view.active_count == view.total_count:
            shown = f"Members: {view.total_count}"
        else:
            shown = f"Matches: {view.active_count} of {view.total_count}"
        self.status_label.config(
            text=f"{shown} | Page {view.page_index} of {view.total_pages}"
            f" | Selected: {view.selected_count}"
        )

    def refresh(self) -> None:
        """Redraw everything from the current state."""
        with perf_timer("render", row_count=len(self.table_state.store)):
            view = render_state(self.table_state)

        self._suppress_notifications = True
        try:
            self._view = view
            data = [
                [
                    CHECKED_MARK if row.checked else UNCHECKED_MARK,
                    *row.cells,
                    row.action.capitalize(),
                    "Delete",
                ]
                for row in view.rows
            ]
            self.sheet.set_sheet_data(data, reset_col_positions=False)
            self._apply_row_styling(view)
            self.sheet.refresh()

            self.select_all_var.set(view.header_checked)
            self.delete_selected_button.config(
                state=tk.NORMAL if view.bulk_delete_enabled else tk.DISABLED
            )
            self._rebuild_pager(view)
            self._update_status(view)
        finally:
            self._suppress_notifications = False

    def set_message(self, message: str) -> None:
        """Show a transient message in the status bar (e.g. while loading)."""
        self.status_label.config(text=message)

    def _create_widgets(self) -> None:
        """Create all panel widgets."""
        # Search bar
        search_frame = ttk.Frame(self)
        search_frame.pack(fill=tk.X, padx=5, pady=(5, 2))

        ttk.Label(search_frame, text="Search:").pack(side=tk.LEFT)
        self.search_var = tk.StringVar()
        self.search_entry = ttk.Entry(search_frame, textvariable=self.search_var, width=40)
        self.search_entry.pack(side=tk.LEFT, padx=(5, 0), fill=tk.X, expand=True)
        self.search_var.trace_add("write", lambda *_: self._on_search_changed())

        self.select_all_var = tk.BooleanVar(value=False)
        ttk.Checkbutton(
            search_frame,
            text="Select all",
            variable=self.select_all_var,
            command=self._on_select_all,
        ).pack(side=tk.RIGHT, padx=(10, 0))

        # Table
        self.sheet = Sheet(
            self,
            headers=["", "Name", "Email", "Role", "Edit", "Delete"],
            show_row_index=False,
            height=320,
            width=760,
        )
        self.sheet.pack(fill=tk.BOTH, expand=True, padx=5, pady=5)

        self.sheet.enable_bindings("single_select", "edit_cell", "arrowkeys", "copy")
        self.sheet.set_column_widths([30, 180, 280, 100, 70, 70])
        self.sheet.readonly_columns([COL_CHECK, COL_ACTION, COL_DELETE])
        self.sheet.edit_validation(self._validate_edit)
        self.sheet.bind("<<SheetModified>>", self._on_sheet_modified)
        self.sheet.bind("<ButtonRelease-1>", self._on_click)

        # Footer: bulk delete, pager, status
        footer = ttk.Frame(self)
        footer.pack(fill=tk.X, padx=5, pady=(2, 5))

        self.delete_selected_button = ttk.Button(
            footer,
            text="Delete Selected",
            command=self._on_delete_selected,
            state=tk.DISABLED,
        )
        self.delete_selected_button.pack(side=tk.LEFT)

        self.pager_frame = ttk.Frame(footer)
        self.pager_frame.pack(side=tk.LEFT, expand=True)

        self.status_label = ttk.Label(footer, text="")
        self.status_label.pack(side=tk.RIGHT)

    def __init__(self, parent: tk.Widget, table_state: TableState):
        """Initialize the table panel.

        Args:
            parent: Parent widget
            table_state: TableState driving the table
        """
        super().__init__(parent)

        self.table_state = table_state
        self._view = TableView()

        # Suppress change notifications during programmatic updates
        self._suppress_notifications = False

        self._create_widgets()

        self.table_state.add_listener(self.refresh)
        self.bind("<Destroy>", self._on_destroy)

        self.refresh()

    def _on_destroy(self, event) -> None:
        # Only handle destruction of this widget, not children
        if event.widget == self:
            self.table_state.remove_listener(self.refresh)
