"""Predicate composition over comparison operators.

Predicates are plain callables over records. Records may be mappings
(stored documents) or objects (aggregates); fields are read by name.
Every filter field narrows the candidate set independently, so a composed
predicate is the logical AND of its parts.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any, TypeVar

from shared_kernel.filtering.value_objects import UNSET, RangeFilter

T = TypeVar("T")

Predicate = Callable[[Any], bool]

__all__ = [
    "Predicate",
    "read_field",
    "exact",
    "in_range",
    "overlaps",
    "all_of",
    "criteria_predicate",
    "filter_items",
]


def read_field(record: Any, name: str) -> Any:
    """Read a field from a mapping or an object, None when absent."""
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def exact(name: str, expected: Any) -> Predicate:
    """Match records whose field equals ``expected``."""

    def predicate(record: Any) -> bool:
        return read_field(record, name) == expected

    return predicate


def in_range(name: str, bounds: RangeFilter) -> Predicate:
    """Match records whose field satisfies the range bounds.

    A null field only matches ``eq=None``; it never satisfies an ordering
    bound.
    """

    def predicate(record: Any) -> bool:
        value = read_field(record, name)
        if bounds.has_eq:
            return value == bounds.eq
        if value is None:
            return bounds.is_empty()
        if bounds.gt is not UNSET and not value > bounds.gt:
            return False
        if bounds.gte is not UNSET and not value >= bounds.gte:
            return False
        if bounds.lt is not UNSET and not value < bounds.lt:
            return False
        if bounds.lte is not UNSET and not value <= bounds.lte:
            return False
        return True

    return predicate


def overlaps(name: str, values: Iterable[Any]) -> Predicate:
    """Match records whose array field shares at least one element with ``values``."""
    wanted = frozenset(values)

    def predicate(record: Any) -> bool:
        field_value = read_field(record, name) or ()
        return not wanted.isdisjoint(field_value)

    return predicate


def all_of(predicates: Iterable[Predicate]) -> Predicate:
    """Combine predicates with logical AND; no predicates matches everything."""
    parts = tuple(predicates)

    def predicate(record: Any) -> bool:
        return all(part(record) for part in parts)

    return predicate


def filter_items(items: Iterable[T], predicate: Predicate) -> Sequence[T]:
    """Return matching items, preserving their relative order."""
    return [item for item in items if predicate(item)]


def criteria_predicate(
    exact_fields: Mapping[str, Any] | None = None,
    ranges: Mapping[str, RangeFilter | None] | None = None,
    overlap_fields: Mapping[str, Iterable[Any] | None] | None = None,
) -> Predicate:
    """Compose a predicate from per-field criteria.

    Fields whose criterion is None are left unconstrained; every supplied
    criterion narrows the match.

    Args:
        exact_fields: Field name to expected scalar value
        ranges: Field name to range bounds
        overlap_fields: Field name to the set an array field must intersect
    """
    parts: list[Predicate] = []
    for name, expected in (exact_fields or {}).items():
        if expected is not None:
            parts.append(exact(name, expected))
    for name, bounds in (ranges or {}).items():
        if bounds is not None:
            parts.append(in_range(name, bounds))
    for name, values in (overlap_fields or {}).items():
        if values is not None:
            parts.append(overlaps(name, values))
    return all_of(parts)
