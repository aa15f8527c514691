"""Value objects for the membership domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers, lookups and query criteria.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Union

from ulid import ULID

from shared_kernel.exceptions import InvalidArgumentError
from shared_kernel.filtering import RangeFilter

IDENTIFIER_LENGTH = 24


def _validate_identifier(value: object, argument: str, length: int) -> str:
    if not isinstance(value, str) or len(value) != length:
        raise InvalidArgumentError(
            argument, f"{argument} must be a string of {length} characters"
        )
    return value


@dataclass(frozen=True)
class GroupId:
    """Identifier for a Group aggregate.

    Storage-assigned. Generated ids are the first 24 hex characters of a
    ULID: a 48-bit timestamp followed by 48 random bits, so they sort by
    creation time like a document store object id.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> GroupId:
        """Generate a new time-sortable GroupId."""
        return cls(value=ULID().hex[:IDENTIFIER_LENGTH])

    @classmethod
    def from_string(
        cls, value: str, *, argument: str = "group_id", length: int = IDENTIFIER_LENGTH
    ) -> GroupId:
        """Create GroupId from string value.

        Raises:
            InvalidArgumentError: If value is not a string of the identifier length
        """
        return cls(value=_validate_identifier(value, argument, length))


@dataclass(frozen=True)
class UserId:
    """Identifier of a user.

    Assigned outside this system; it is the join key into ``Group.users``.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def from_string(
        cls, value: str, *, argument: str = "user_id", length: int = IDENTIFIER_LENGTH
    ) -> UserId:
        """Create UserId from string value.

        Raises:
            InvalidArgumentError: If value is not a string of the identifier length
        """
        return cls(value=_validate_identifier(value, argument, length))


@dataclass(frozen=True)
class ById:
    """Look a group up by its identifier."""

    value: str


@dataclass(frozen=True)
class ByName:
    """Look a group up by its exact display name."""

    value: str


@dataclass(frozen=True)
class BySlug:
    """Look a group up by its slug."""

    value: str


GroupLookup = Union[ById, ByName, BySlug]


@dataclass(frozen=True)
class GroupFilter:
    """Query criteria over stored groups.

    Every supplied field narrows the result (logical AND). ``users`` matches
    groups sharing at least one member with the supplied set.
    """

    id: str | None = None
    name: str | None = None
    slug: str | None = None
    deleted: bool | None = None
    count: RangeFilter | None = None
    created_at: RangeFilter | None = None
    updated_at: RangeFilter | None = None
    deleted_at: RangeFilter | None = None
    users: frozenset[str] | None = None


@dataclass(frozen=True)
class UserFilter:
    """Query criteria over stored membership records.

    ``groups`` matches records sharing at least one group with the supplied set.
    """

    id: str | None = None
    deleted: bool | None = None
    count: RangeFilter | None = None
    created_at: RangeFilter | None = None
    updated_at: RangeFilter | None = None
    deleted_at: RangeFilter | None = None
    groups: frozenset[str] | None = None


@dataclass(frozen=True)
class EdgeDiscrepancy:
    """An asymmetric user-group edge found by a reconciliation audit.

    Attributes:
        user_id: The user side of the edge
        group_id: The group side of the edge
        listed_by_group: Whether the live group lists the user
        listed_by_user: Whether the live membership record lists the group
        detected_at: When the audit observed the asymmetry
    """

    user_id: str
    group_id: str
    listed_by_group: bool
    listed_by_user: bool
    detected_at: datetime
