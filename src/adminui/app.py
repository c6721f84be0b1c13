import sys
import tkinter as tk
from tkinter import ttk

from .data.data_source import DataSource
from .data.loader import MemberLoader
from .data.table_state import TableState
from .data.user_store import UserStore
from .settings import AppSettings
from .utils.debug_trace import logger, setup_debug_logging
from .utils.filters import get_filter
from .views.table_panel import TablePanel

# Interval between checks on the initial fetch, in milliseconds
FETCH_POLL_INTERVAL_MS = 100


def get_version():
    """Get version from package metadata."""
    try:
        from importlib.metadata import version

        return version("adminui")
    except Exception:
        return "Development"


class AdminUIApp:
    """Main application window for the admin table."""

    def _setup_window(self):
        self.root.title(f"Admin UI {get_version()}")
        self.root.geometry("820x480")
        self.root.minsize(600, 360)

    def _create_widgets(self):
        self.panel = TablePanel(self.root, self.table_state)
        self.panel.pack(fill=tk.BOTH, expand=True)

        self.source_label = ttk.Label(
            self.root, text=f"Source: {self.data_source.location}", foreground="gray"
        )
        self.source_label.pack(side=tk.BOTTOM, anchor=tk.W, padx=5, pady=(0, 3))

    def __init__(self, settings: AppSettings | None = None):
        self.settings = settings or AppSettings()
        self.data_source: DataSource = self.settings.create_data_source()

        self.store = UserStore()
        self.table_state = TableState(
            self.store,
            page_size=self.settings.page_size,
            search_filter=get_filter(self.settings.search_mode),
        )

        self.loader = MemberLoader(self.data_source, self.store)

        self.root = tk.Tk()
        self._setup_window()
        self._create_widgets()
        self.root.protocol("WM_DELETE_WINDOW", self.on_closing)

    def start_loading(self):
        """Fetch the member list in the background; the table stays empty meanwhile."""
        self.panel.set_message("Loading members...")
        self.loader.start()
        self.root.after(FETCH_POLL_INTERVAL_MS, self._check_fetch)

    def _check_fetch(self):
        """Poll the fetch from the Tk thread until it finishes."""
        if not self.loader.poll():
            self.root.after(FETCH_POLL_INTERVAL_MS, self._check_fetch)
            return
        if self.loader.error is not None:
            # Store stays empty; replace the loading message
            self.panel.refresh()

    def on_closing(self):
        """Handle application shutdown."""
        self.loader.shutdown()
        self.root.destroy()

    def run(self):
        """Run the admin table"""
        self.start_loading()
        self.root.mainloop()


def main(argv=None) -> None:
    """Entry point for the application."""
    settings = AppSettings.from_args(argv)
    setup_debug_logging(settings.debug)
    AdminUIApp(settings).run()


def main_debug(argv=None) -> None:
    """Entry point with DEBUG logging on the console."""
    settings = AppSettings.from_args(argv, debug=True)
    setup_debug_logging(settings.debug)
    logger.debug(f"Starting with {settings}")
    AdminUIApp(settings).run()


if __name__ == "__main__":
    main(sys.argv[1:])
