"""Offset/page pagination.

The algorithm runs in a fixed order:

1. drop ``offset`` leading items from the filtered, insertion-ordered result
2. ``total`` is the number of items left after the offset
3. ``pages`` is 1 when ``limit`` is 0 or covers ``total``, else ceil(total / limit)
4. the page window is ``[(page - 1) * limit, (page - 1) * limit + limit)`` of
   the offset-applied items, or everything left when ``limit`` is 0

A page beyond the last one yields an empty ``docs`` list.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import TypeVar

from shared_kernel.filtering.value_objects import PageResult, Pagination

T = TypeVar("T")

__all__ = ["count_pages", "page_window", "paginate", "build_page"]


def count_pages(total: int, limit: int) -> int:
    """Number of pages needed for ``total`` items at ``limit`` per page."""
    if limit == 0 or limit >= total:
        return 1
    return math.ceil(total / limit)


def page_window(pagination: Pagination) -> tuple[int, int | None]:
    """Absolute slice bounds of the requested page.

    Bounds are relative to the filtered result *before* the offset is
    applied, so storage backends can push them down as OFFSET/LIMIT.

    Returns:
        Tuple of (start, stop); stop is None when the page is unlimited
    """
    if pagination.limit == 0:
        return pagination.offset, None
    start = pagination.offset + (pagination.page - 1) * pagination.limit
    return start, start + pagination.limit


def build_page(docs: list[T], matched: int, pagination: Pagination) -> PageResult[T]:
    """Assemble a PageResult from an already sliced window.

    Args:
        docs: Items of the page window
        matched: Number of matching items before the offset was applied
        pagination: The page request
    """
    total = max(matched - pagination.offset, 0)
    return PageResult(
        docs=docs,
        total=total,
        limit=pagination.limit,
        page=pagination.page,
        pages=count_pages(total, pagination.limit),
        offset=pagination.offset,
    )


def paginate(items: Sequence[T], pagination: Pagination | None = None) -> PageResult[T]:
    """Paginate an in-memory, insertion-ordered sequence."""
    pagination = pagination or Pagination()
    start, stop = page_window(pagination)
    return build_page(list(items[start:stop]), len(items), pagination)
