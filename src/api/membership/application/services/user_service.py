"""User application service for the membership bounded context.

A user exists here only as its membership record. The service creates,
reads and soft-deletes those records and lists the groups a user is in.
"""

from __future__ import annotations

from datetime import UTC, datetime

from membership.application.observability import (
    DefaultUserServiceProbe,
    UserServiceProbe,
)
from membership.application.services.relation_service import RelationService
from membership.domain.aggregates import Group, Membership
from membership.domain.value_objects import GroupFilter, UserFilter
from membership.ports.exceptions import (
    GroupNotFoundError,
    UserExistsError,
    UserNotFoundError,
)
from membership.ports.repositories import IGroupRepository, IUserRepository
from shared_kernel.exceptions import InvalidArgumentError
from shared_kernel.filtering import PageResult, Pagination, paginate


class UserService:
    """Application service for membership records."""

    def __init__(
        self,
        user_repository: IUserRepository,
        group_repository: IGroupRepository,
        relation_service: RelationService,
        probe: UserServiceProbe | None = None,
    ):
        """Initialize UserService with dependencies.

        Args:
            user_repository: Storage gateway for membership records
            group_repository: Storage gateway for group documents
            relation_service: Maintainer of the user-group edges
            probe: Optional domain probe for observability
        """
        self._user_repository = user_repository
        self._group_repository = group_repository
        self._relation_service = relation_service
        self._probe = probe or DefaultUserServiceProbe()

    async def create_user(self, user_id: str) -> Membership:
        """Create an empty membership record.

        Raises:
            InvalidArgumentError: If the id is malformed
            UserExistsError: If the user already has a live record
        """
        uid = self._relation_service.parse_user_id(user_id)
        existing = await self._user_repository.find_one(
            UserFilter(id=uid.value, deleted=False)
        )
        if existing is not None:
            self._probe.user_already_exists(uid.value)
            raise UserExistsError(f"User {uid.value} already exists")

        membership = await self._user_repository.create(uid)
        self._probe.user_created(uid.value)
        return membership

    async def get_user(self, user_id: str, deleted: bool = False) -> Membership | None:
        """Return the user's live (or, with ``deleted=True``, deleted) record.

        Raises:
            InvalidArgumentError: If the id or the deleted flag is invalid
        """
        uid = self._relation_service.parse_user_id(user_id)
        if not isinstance(deleted, bool):
            raise InvalidArgumentError("deleted", "deleted must be a boolean")
        return await self._user_repository.find_one(
            UserFilter(id=uid.value, deleted=deleted)
        )

    async def delete_user(self, user_id: str) -> None:
        """Remove the user from its live groups, then soft-delete its record.

        Listed groups that are missing or deleted are skipped; a deleted
        group keeps its frozen member list.

        Raises:
            InvalidArgumentError: If the id is malformed
            UserNotFoundError: If the user has no live record
        """
        uid = self._relation_service.parse_user_id(user_id)
        membership = await self._user_repository.find_one(
            UserFilter(id=uid.value, deleted=False)
        )
        if membership is None:
            self._probe.user_not_found(uid.value)
            raise UserNotFoundError(f"User {uid.value} not found")

        try:
            for group_id in membership.groups:
                try:
                    await self._relation_service.remove_user_from_group(
                        uid.value, group_id.value
                    )
                except GroupNotFoundError:
                    self._probe.stale_group_skipped(uid.value, group_id.value)

            await self._user_repository.update(
                uid, {"deleted": True, "deleted_at": datetime.now(UTC)}
            )
        except Exception as e:
            self._probe.user_operation_failed("delete", uid.value, str(e))
            raise
        self._probe.user_deleted(uid.value, group_count=membership.count)

    async def list_users(
        self,
        criteria: UserFilter | None = None,
        pagination: Pagination | None = None,
    ) -> PageResult[Membership]:
        """Return a page of membership records matching the criteria."""
        return await self._user_repository.filter_many(
            criteria or UserFilter(), pagination or Pagination()
        )

    async def list_groups(
        self, user_id: str, pagination: Pagination | None = None
    ) -> PageResult[Group]:
        """Return a page of the live groups the user belongs to.

        Groups are taken from the user's live record in the order they were
        added. A user without a live record belongs to no groups.

        Raises:
            InvalidArgumentError: If the id is malformed
        """
        uid = self._relation_service.parse_user_id(user_id)
        membership = await self._user_repository.find_one(
            UserFilter(id=uid.value, deleted=False)
        )
        if membership is None:
            return paginate([], pagination)

        groups: list[Group] = []
        for group_id in membership.groups:
            group = await self._group_repository.find_one(
                GroupFilter(id=group_id.value, deleted=False)
            )
            if group is not None:
                groups.append(group)
        return paginate(groups, pagination)
