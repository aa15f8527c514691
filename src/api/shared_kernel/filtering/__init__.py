"""Generic comparison-filter and pagination engine.

Shared by every entity type: callers build predicates from exact, range and
set-overlap shapes, filter an insertion-ordered collection and paginate it.
"""

from shared_kernel.filtering.pagination import (
    build_page,
    count_pages,
    page_window,
    paginate,
)
from shared_kernel.filtering.predicates import (
    Predicate,
    all_of,
    criteria_predicate,
    exact,
    filter_items,
    in_range,
    overlaps,
    read_field,
)
from shared_kernel.filtering.value_objects import (
    UNSET,
    PageResult,
    Pagination,
    RangeFilter,
)

__all__ = [
    "UNSET",
    "PageResult",
    "Pagination",
    "Predicate",
    "RangeFilter",
    "all_of",
    "criteria_predicate",
    "build_page",
    "count_pages",
    "exact",
    "filter_items",
    "in_range",
    "overlaps",
    "page_window",
    "paginate",
    "read_field",
]
