"""Relation application service for the membership bounded context.

Maintains the bidirectional user-group edge. Every edge lives on two
documents (``Group.users`` and ``Membership.groups``) and the storage
gateway only guarantees single-document atomicity, so each composite
operation writes the group side first and the user side second. If the
second write fails the group side is already committed; the reconciliation
service derives the user side back from the groups.
"""

from __future__ import annotations

from membership.application.observability import (
    DefaultRelationServiceProbe,
    RelationServiceProbe,
)
from membership.domain.value_objects import (
    IDENTIFIER_LENGTH,
    GroupFilter,
    GroupId,
    UserFilter,
    UserId,
)
from membership.ports.exceptions import GroupNotFoundError
from membership.ports.repositories import IGroupRepository, IUserRepository


class RelationService:
    """Application service keeping both sides of user-group edges in sync.

    Edge writes are read-modify-write on one document each. Adding an edge
    that is already present, or removing one that is absent, leaves that
    document untouched.
    """

    def __init__(
        self,
        group_repository: IGroupRepository,
        user_repository: IUserRepository,
        probe: RelationServiceProbe | None = None,
        identifier_length: int = IDENTIFIER_LENGTH,
    ):
        """Initialize RelationService with dependencies.

        Args:
            group_repository: Storage gateway for group documents
            user_repository: Storage gateway for membership records
            probe: Optional domain probe for observability
            identifier_length: Required length of user and group ids
        """
        self._group_repository = group_repository
        self._user_repository = user_repository
        self._probe = probe or DefaultRelationServiceProbe()
        self._identifier_length = identifier_length

    def parse_user_id(self, user_id: str) -> UserId:
        """Validate a raw user id.

        Raises:
            InvalidArgumentError: If the id does not have the identifier shape
        """
        return UserId.from_string(user_id, length=self._identifier_length)

    def parse_group_id(self, group_id: str) -> GroupId:
        """Validate a raw group id.

        Raises:
            InvalidArgumentError: If the id does not have the identifier shape
        """
        return GroupId.from_string(group_id, length=self._identifier_length)

    async def add_user_to_group(self, user_id: str, group_id: str) -> None:
        """Add the user to the live group's member set (group side only).

        Raises:
            InvalidArgumentError: If either id is malformed
            GroupNotFoundError: If the group is missing or deleted
        """
        await self._add_user_to_group(
            self.parse_user_id(user_id), self.parse_group_id(group_id)
        )

    async def add_group_to_user(self, user_id: str, group_id: str) -> None:
        """Add the group to the user's membership record (user side only).

        Creates the membership record when the user has no live one.

        Raises:
            InvalidArgumentError: If either id is malformed
        """
        await self._add_group_to_user(
            self.parse_user_id(user_id), self.parse_group_id(group_id)
        )

    async def remove_user_from_group(self, user_id: str, group_id: str) -> None:
        """Remove the user from the live group's member set (group side only).

        Raises:
            InvalidArgumentError: If either id is malformed
            GroupNotFoundError: If the group is missing or deleted
        """
        await self._remove_user_from_group(
            self.parse_user_id(user_id), self.parse_group_id(group_id)
        )

    async def remove_group_from_user(self, user_id: str, group_id: str) -> None:
        """Remove the group from the user's membership record (user side only).

        A user without a live membership record is left alone.

        Raises:
            InvalidArgumentError: If either id is malformed
        """
        await self._remove_group_from_user(
            self.parse_user_id(user_id), self.parse_group_id(group_id)
        )

    async def add_user(self, user_id: str, group_id: str) -> None:
        """Create the edge on both sides, group side first.

        Raises:
            InvalidArgumentError: If either id is malformed
            GroupNotFoundError: If the group is missing or deleted; nothing
                is written in that case
        """
        uid = self.parse_user_id(user_id)
        gid = self.parse_group_id(group_id)
        try:
            await self._add_user_to_group(uid, gid)
            await self._add_group_to_user(uid, gid)
        except Exception as e:
            self._probe.relation_update_failed(
                operation="add_user",
                user_id=uid.value,
                group_id=gid.value,
                error=str(e),
            )
            raise

    async def remove_user(self, user_id: str, group_id: str) -> None:
        """Remove the edge from both sides, group side first.

        Raises:
            InvalidArgumentError: If either id is malformed
            GroupNotFoundError: If the group is missing or deleted; nothing
                is written in that case
        """
        uid = self.parse_user_id(user_id)
        gid = self.parse_group_id(group_id)
        try:
            await self._remove_user_from_group(uid, gid)
            await self._remove_group_from_user(uid, gid)
        except Exception as e:
            self._probe.relation_update_failed(
                operation="remove_user",
                user_id=uid.value,
                group_id=gid.value,
                error=str(e),
            )
            raise

    async def _add_user_to_group(self, user_id: UserId, group_id: GroupId) -> None:
        group = await self._group_repository.find_one(
            GroupFilter(id=group_id.value, deleted=False)
        )
        if group is None:
            raise GroupNotFoundError(f"Group {group_id.value} not found")

        if not group.add_user(user_id):
            self._probe.relation_unchanged("group", user_id.value, group_id.value)
            return

        await self._group_repository.update(
            group_id, {"users": group.user_values(), "count": group.count}
        )
        self._probe.user_added_to_group(
            user_id=user_id.value, group_id=group_id.value, member_count=group.count
        )

    async def _add_group_to_user(self, user_id: UserId, group_id: GroupId) -> None:
        membership = await self._user_repository.find_one(
            UserFilter(id=user_id.value, deleted=False)
        )
        if membership is None:
            await self._user_repository.create(user_id, [group_id])
            self._probe.group_added_to_user(
                user_id=user_id.value, group_id=group_id.value, created_record=True
            )
            return

        if not membership.add_group(group_id):
            self._probe.relation_unchanged("user", user_id.value, group_id.value)
            return

        await self._user_repository.update(
            user_id, {"groups": membership.group_values(), "count": membership.count}
        )
        self._probe.group_added_to_user(
            user_id=user_id.value, group_id=group_id.value, created_record=False
        )

    async def _remove_user_from_group(
        self, user_id: UserId, group_id: GroupId
    ) -> None:
        group = await self._group_repository.find_one(
            GroupFilter(id=group_id.value, deleted=False)
        )
        if group is None:
            raise GroupNotFoundError(f"Group {group_id.value} not found")

        if not group.remove_user(user_id):
            self._probe.relation_unchanged("group", user_id.value, group_id.value)
            return

        await self._group_repository.update(
            group_id, {"users": group.user_values(), "count": group.count}
        )
        self._probe.user_removed_from_group(
            user_id=user_id.value, group_id=group_id.value, member_count=group.count
        )

    async def _remove_group_from_user(
        self, user_id: UserId, group_id: GroupId
    ) -> None:
        membership = await self._user_repository.find_one(
            UserFilter(id=user_id.value, deleted=False)
        )
        if membership is None:
            self._probe.membership_record_missing(user_id.value, group_id.value)
            return

        if not membership.remove_group(group_id):
            self._probe.relation_unchanged("user", user_id.value, group_id.value)
            return

        await self._user_repository.update(
            user_id, {"groups": membership.group_values(), "count": membership.count}
        )
        self._probe.group_removed_from_user(user_id.value, group_id.value)
