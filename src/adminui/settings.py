import argparse
from collections.abc import Sequence
from dataclasses import dataclass

from .data.data_source import DataSource, HttpDataSource, JsonFileDataSource
from .models.constants import (
    DATA_URL,
    FETCH_TIMEOUT,
    PAGE_SIZE,
    SEARCH_MODE_LITERAL,
    SEARCH_MODE_REGEX,
    SEARCH_MODES,
)


@dataclass
class AppSettings:
    """Application settings and configuration."""

    data_url: str = DATA_URL
    data_file: str | None = None
    page_size: int = PAGE_SIZE
    search_mode: str = SEARCH_MODE_REGEX
    fetch_timeout: float = FETCH_TIMEOUT
    debug: bool = False

    def __post_init__(self):
        if self.search_mode not in SEARCH_MODES:
            raise ValueError(f"Unknown search mode: {self.search_mode!r}")
        if self.page_size <= 0:
            raise ValueError(f"page_size must be positive, got {self.page_size}")

    @classmethod
    def from_args(cls, argv: Sequence[str] | None = None, debug: bool = False) -> "AppSettings":
        """Build settings from command line arguments."""
        parser = argparse.ArgumentParser(
            prog="adminui-debug" if debug else "adminui",
            description="Browse, search, edit and delete member records.",
        )
        source = parser.add_mutually_exclusive_group()
        source.add_argument("--url", default=DATA_URL, help="JSON endpoint to load members from")
        source.add_argument("--file", dest="data_file", help="Local JSON file to load instead")
        parser.add_argument(
            "--literal-search",
            action="store_true",
            help="Match the search text literally instead of as a regular expression",
        )
        parser.add_argument(
            "--timeout",
            type=float,
            default=FETCH_TIMEOUT,
            help="Seconds to wait for the member list",
        )
        args = parser.parse_args(argv)

        return cls(
            data_url=args.url,
            data_file=args.data_file,
            search_mode=SEARCH_MODE_LITERAL if args.literal_search else SEARCH_MODE_REGEX,
            fetch_timeout=args.timeout,
            debug=debug,
        )

    def create_data_source(self) -> DataSource:
        """Data source selected by these settings (file wins over URL)."""
        if self.data_file:
            return JsonFileDataSource(self.data_file)
        return HttpDataSource(self.data_url, timeout=self.fetch_timeout)
