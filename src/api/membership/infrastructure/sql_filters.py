"""Compile filter criteria into SQLAlchemy WHERE clauses.

Mirrors the document predicates of the in-memory gateway: exact matches,
range bounds (``eq`` wins, NULL never satisfies an ordering bound) and
array overlap through PostgreSQL's ``&&`` operator.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import ColumnElement

from membership.domain.value_objects import GroupFilter, UserFilter
from membership.infrastructure.models import GroupModel, MembershipModel
from shared_kernel.filtering import UNSET, RangeFilter


def range_clauses(column: Any, bounds: RangeFilter) -> list[ColumnElement[bool]]:
    """Translate range bounds over ``column``."""
    if bounds.has_eq:
        if bounds.eq is None:
            return [column.is_(None)]
        return [column == bounds.eq]

    clauses: list[ColumnElement[bool]] = []
    if bounds.gt is not UNSET:
        clauses.append(column > bounds.gt)
    elif bounds.gte is not UNSET:
        clauses.append(column >= bounds.gte)
    if bounds.lt is not UNSET:
        clauses.append(column < bounds.lt)
    elif bounds.lte is not UNSET:
        clauses.append(column <= bounds.lte)
    return clauses


def _compose(
    exact: list[tuple[Any, Any]],
    ranges: list[tuple[Any, RangeFilter | None]],
    overlap: tuple[Any, frozenset[str] | None],
) -> list[ColumnElement[bool]]:
    clauses: list[ColumnElement[bool]] = []
    for column, expected in exact:
        if expected is not None:
            clauses.append(column == expected)
    for column, bounds in ranges:
        if bounds is not None:
            clauses.extend(range_clauses(column, bounds))
    column, values = overlap
    if values is not None:
        clauses.append(column.overlap(sorted(values)))
    return clauses


def group_clauses(criteria: GroupFilter) -> list[ColumnElement[bool]]:
    """WHERE clauses for group criteria."""
    return _compose(
        exact=[
            (GroupModel.id, criteria.id),
            (GroupModel.name, criteria.name),
            (GroupModel.slug, criteria.slug),
            (GroupModel.deleted, criteria.deleted),
        ],
        ranges=[
            (GroupModel.count, criteria.count),
            (GroupModel.created_at, criteria.created_at),
            (GroupModel.updated_at, criteria.updated_at),
            (GroupModel.deleted_at, criteria.deleted_at),
        ],
        overlap=(GroupModel.users, criteria.users),
    )


def user_clauses(criteria: UserFilter) -> list[ColumnElement[bool]]:
    """WHERE clauses for membership criteria."""
    return _compose(
        exact=[
            (MembershipModel.user_id, criteria.id),
            (MembershipModel.deleted, criteria.deleted),
        ],
        ranges=[
            (MembershipModel.count, criteria.count),
            (MembershipModel.created_at, criteria.created_at),
            (MembershipModel.updated_at, criteria.updated_at),
            (MembershipModel.deleted_at, criteria.deleted_at),
        ],
        overlap=(MembershipModel.groups, criteria.groups),
    )
