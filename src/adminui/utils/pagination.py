"""Page arithmetic for the admin table.

Pages are 1-based. There is always at least one page, so an empty
table still shows "page 1 of 1".
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


def total_pages(size: int, page_size: int) -> int:
    """Number of pages needed for size items (minimum 1)."""
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")
    return max(1, math.ceil(size / page_size))


def visible_slice(items: Sequence[T], page_index: int, page_size: int) -> list[T]:
    """Return the items shown on a page.

    Args:
        items: The active set.
        page_index: 1-based page number.
        page_size: Items per page.

    Returns:
        The page's items. An out-of-range page yields an empty list.
    """
    if page_index < 1 or page_size <= 0:
        return []
    start = (page_index - 1) * page_size
    return list(items[start : start + page_size])


def clamp_page(page_index: int, size: int, page_size: int) -> int:
    """Clamp page_index into [1, total_pages(size, page_size)]."""
    return min(max(1, page_index), total_pages(size, page_size))


def page_window(current: int, total: int, width: int) -> list[int]:
    """Page numbers to show as numbered pager buttons.

    Keeps the current page centred where possible and never goes
    outside [1, total].

    Example:
        page_window(5, 10, 5) -> [3, 4, 5, 6, 7]
        page_window(1, 10, 5) -> [1, 2, 3, 4, 5]
        page_window(10, 10, 5) -> [6, 7, 8, 9, 10]
    """
    if total <= width:
        return list(range(1, total + 1))

    start = current - width // 2
    start = max(1, min(start, total - width + 1))
    return list(range(start, start + width))
