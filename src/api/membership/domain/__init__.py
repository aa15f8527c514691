"""Membership domain layer.

Pure domain objects: the Group and Membership aggregates, identifiers,
group lookups and query criteria. No infrastructure imports.
"""

from membership.domain.aggregates import Group, Membership
from membership.domain.value_objects import (
    ById,
    ByName,
    BySlug,
    EdgeDiscrepancy,
    GroupFilter,
    GroupId,
    GroupLookup,
    UserFilter,
    UserId,
)

__all__ = [
    "ById",
    "ByName",
    "BySlug",
    "EdgeDiscrepancy",
    "Group",
    "GroupFilter",
    "GroupId",
    "GroupLookup",
    "Membership",
    "UserFilter",
    "UserId",
]
