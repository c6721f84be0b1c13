"""Search strategies for the admin table.

A record matches when the query is found in its name, email or role,
ignoring case. The regex strategy treats the query as a regular
expression fragment; a query that does not compile falls back to a
literal match instead of failing the search.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import TYPE_CHECKING

from ..models.constants import SEARCH_MODE_LITERAL, SEARCH_MODE_REGEX
from .debug_trace import logger, perf_timer

if TYPE_CHECKING:
    from ..models.user_record import UserRecord


def compile_query(query: str, literal: bool = False) -> re.Pattern[str]:
    """Compile a search query into a case-insensitive pattern.

    Args:
        query: The text typed into the search box.
        literal: If True, escape the query so it only matches itself.

    Returns:
        Compiled pattern. An invalid regular expression is escaped and
        compiled as a literal.
    """
    if literal:
        return re.compile(re.escape(query), re.IGNORECASE)

    try:
        return re.compile(query, re.IGNORECASE)
    except re.error as e:
        logger.warning(f"Invalid search pattern {query!r} ({e}); matching literally")
        return re.compile(re.escape(query), re.IGNORECASE)


def record_matches(record: UserRecord, pattern: re.Pattern[str]) -> bool:
    """Check if the pattern matches anywhere in name, email or role."""
    return any(pattern.search(value) for value in record.field_values())


class FilterBase:
    """Base class for search strategies"""

    literal = False

    def filter_matches(self, records: Sequence[UserRecord], query: str) -> list[UserRecord]:
        """Return the records matching query, in their original order."""
        if not query:
            return list(records)

        pattern = compile_query(query, literal=self.literal)
        with perf_timer("search", row_count=len(records)):
            matches = [record for record in records if record_matches(record, pattern)]

        logger.debug(f"Search {query!r} matched {len(matches)} of {len(records)} records")
        return matches


class RegexFilter(FilterBase):
    """Query is a regular expression fragment (invalid patterns match literally)"""


class LiteralFilter(FilterBase):
    """Query is matched as plain text"""

    literal = True


FILTERS: dict[str, type[FilterBase]] = {
    SEARCH_MODE_REGEX: RegexFilter,
    SEARCH_MODE_LITERAL: LiteralFilter,
}


def get_filter(search_mode: str) -> FilterBase:
    """Create the strategy for a search mode.

    Raises:
        ValueError: If search_mode is unknown.
    """
    try:
        return FILTERS[search_mode]()
    except KeyError:
        raise ValueError(f"Unknown search mode: {search_mode!r}") from None
