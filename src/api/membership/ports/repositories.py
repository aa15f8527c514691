"""Repository protocols (ports) for the membership bounded context.

The repositories are the storage gateway: single-document reads and writes
plus a filtered, paginated multi-get. Implementations guarantee atomicity of
a single call only; nothing spans two documents.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

from membership.domain.aggregates import Group, Membership
from membership.domain.value_objects import GroupFilter, GroupId, UserFilter, UserId
from shared_kernel.filtering import PageResult, Pagination


@runtime_checkable
class IGroupRepository(Protocol):
    """Storage gateway for group documents."""

    async def find_one(self, criteria: GroupFilter) -> Group | None:
        """Return the first group (insertion order) matching the criteria.

        Args:
            criteria: Filter criteria; unset fields do not constrain

        Returns:
            The Group aggregate, or None if nothing matches

        Raises:
            InvalidDocumentError: If the stored record is malformed
        """
        ...

    async def create(self, name: str, slug: str) -> Group:
        """Insert a new live group with no members.

        The repository assigns the id and sets created_at == updated_at.

        Raises:
            GroupExistsError: If a live group already uses the slug
        """
        ...

    async def update(self, group_id: GroupId, fields: Mapping[str, Any]) -> None:
        """Apply a partial update to one group document.

        Field values are given in stored form (ids as strings). updated_at is
        bumped past its previous value unless supplied in ``fields``.

        Raises:
            InvalidArgumentError: If ``fields`` names a field that cannot be updated
            GroupNotFoundError: If no group has this id
            GroupExistsError: If the update would duplicate a live slug
        """
        ...

    async def filter_many(
        self, criteria: GroupFilter, pagination: Pagination
    ) -> PageResult[Group]:
        """Return a page of groups matching the criteria, in insertion order."""
        ...


@runtime_checkable
class IUserRepository(Protocol):
    """Storage gateway for membership records.

    A user id may have several records over time (soft-deleted ones plus at
    most one live one). Updates always address the live record.
    """

    async def find_one(self, criteria: UserFilter) -> Membership | None:
        """Return the first membership record matching the criteria.

        Raises:
            InvalidDocumentError: If the stored record is malformed
        """
        ...

    async def create(
        self, user_id: UserId, groups: Sequence[GroupId] = ()
    ) -> Membership:
        """Insert a new live membership record.

        Raises:
            UserExistsError: If the user already has a live record
        """
        ...

    async def update(self, user_id: UserId, fields: Mapping[str, Any]) -> None:
        """Apply a partial update to the user's live membership record.

        Raises:
            InvalidArgumentError: If ``fields`` names a field that cannot be updated
            UserNotFoundError: If the user has no live record
        """
        ...

    async def filter_many(
        self, criteria: UserFilter, pagination: Pagination
    ) -> PageResult[Membership]:
        """Return a page of membership records matching the criteria."""
        ...
