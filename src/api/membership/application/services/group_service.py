"""Group application service for the membership bounded context.

Orchestrates the group lifecycle: creation and renaming with live-slug
uniqueness, soft deletion, restoration and lookups.
"""

from __future__ import annotations

from datetime import UTC, datetime

from membership.application.observability import (
    DefaultGroupServiceProbe,
    GroupServiceProbe,
)
from membership.application.services.relation_service import RelationService
from membership.domain.aggregates import Group
from membership.domain.value_objects import (
    IDENTIFIER_LENGTH,
    ById,
    ByName,
    BySlug,
    GroupFilter,
    GroupId,
    GroupLookup,
)
from membership.ports.exceptions import GroupExistsError, GroupNotFoundError
from membership.ports.repositories import IGroupRepository
from shared_kernel.exceptions import InvalidArgumentError
from shared_kernel.filtering import PageResult, Pagination
from shared_kernel.slugs import normalize

DEFAULT_NAME_MAX_LENGTH = 35


class GroupService:
    """Application service for group management.

    Live groups have unique slugs. Deleting a group leaves its member list
    and the members' membership records untouched; restoring it re-adds the
    group to every member's record.
    """

    def __init__(
        self,
        group_repository: IGroupRepository,
        relation_service: RelationService,
        probe: GroupServiceProbe | None = None,
        name_max_length: int = DEFAULT_NAME_MAX_LENGTH,
        identifier_length: int = IDENTIFIER_LENGTH,
    ):
        """Initialize GroupService with dependencies.

        Args:
            group_repository: Storage gateway for group documents
            relation_service: Maintainer of the user-group edges
            probe: Optional domain probe for observability
            name_max_length: Longest accepted group name, after trimming
            identifier_length: Required length of group ids
        """
        self._group_repository = group_repository
        self._relation_service = relation_service
        self._probe = probe or DefaultGroupServiceProbe()
        self._name_max_length = name_max_length
        self._identifier_length = identifier_length

    def _parse_group_id(self, group_id: str, argument: str = "group_id") -> GroupId:
        return GroupId.from_string(
            group_id, argument=argument, length=self._identifier_length
        )

    def _validate_name(self, name: str) -> tuple[str, str]:
        """Validate a display name and derive its slug.

        Returns:
            Tuple of (trimmed name, slug)

        Raises:
            InvalidArgumentError: If the name is not a string, has the wrong
                length, or has no letters or digits to build a slug from
        """
        if not isinstance(name, str):
            raise InvalidArgumentError("name", "name must be a string")
        trimmed = name.strip()
        if not 1 <= len(trimmed) <= self._name_max_length:
            raise InvalidArgumentError(
                "name",
                f"name must be between 1 and {self._name_max_length} characters",
            )
        slug = normalize(trimmed)
        if not slug:
            raise InvalidArgumentError(
                "name", "name must contain at least one letter or digit"
            )
        return trimmed, slug

    async def _find_live_by_slug(self, slug: str) -> Group | None:
        return await self._group_repository.find_one(
            GroupFilter(slug=slug, deleted=False)
        )

    async def create_group(self, name: str) -> Group:
        """Create a new, empty group.

        Args:
            name: Display name; its slug must not be used by a live group

        Returns:
            The created Group aggregate

        Raises:
            InvalidArgumentError: If the name is invalid
            GroupExistsError: If a live group already uses the slug
        """
        name, slug = self._validate_name(name)
        try:
            existing = await self._find_live_by_slug(slug)
            if existing is not None:
                self._probe.group_slug_conflict(slug, existing.id.value)
                raise GroupExistsError(f"Group with slug '{slug}' already exists")

            group = await self._group_repository.create(name=name, slug=slug)
        except Exception as e:
            self._probe.group_creation_failed(name=name, error=str(e))
            raise

        self._probe.group_created(
            group_id=group.id.value, name=group.name, slug=group.slug
        )
        return group

    async def update_group(self, group_id: str, name: str) -> None:
        """Rename a live group.

        A name that normalizes to the current slug changes nothing, not even
        ``updated_at``.

        Raises:
            InvalidArgumentError: If the id or the name is invalid
            GroupNotFoundError: If the group is missing or deleted
            GroupExistsError: If another live group uses the new slug
        """
        gid = self._parse_group_id(group_id)
        name, slug = self._validate_name(name)

        group = await self._group_repository.find_one(
            GroupFilter(id=gid.value, deleted=False)
        )
        if group is None:
            self._probe.group_not_found(gid.value)
            raise GroupNotFoundError(f"Group {gid.value} not found")

        if group.slug == slug:
            self._probe.group_rename_skipped(gid.value, slug)
            return

        existing = await self._find_live_by_slug(slug)
        if existing is not None and existing.id != gid:
            self._probe.group_slug_conflict(slug, existing.id.value)
            raise GroupExistsError(f"Group with slug '{slug}' already exists")

        try:
            await self._group_repository.update(gid, {"name": name, "slug": slug})
        except Exception as e:
            self._probe.group_operation_failed("update", gid.value, str(e))
            raise
        self._probe.group_renamed(gid.value, old_slug=group.slug, new_slug=slug)

    async def delete_group(self, group_id: str) -> None:
        """Soft-delete a live group, freezing its member list.

        Raises:
            InvalidArgumentError: If the id is malformed
            GroupNotFoundError: If the group is missing or already deleted
        """
        gid = self._parse_group_id(group_id)
        group = await self._group_repository.find_one(
            GroupFilter(id=gid.value, deleted=False)
        )
        if group is None:
            self._probe.group_not_found(gid.value)
            raise GroupNotFoundError(f"Group {gid.value} not found")

        try:
            await self._group_repository.update(
                gid, {"deleted": True, "deleted_at": datetime.now(UTC)}
            )
        except Exception as e:
            self._probe.group_operation_failed("delete", gid.value, str(e))
            raise
        self._probe.group_deleted(gid.value, member_count=group.count)

    async def undelete_group(self, group_id: str) -> None:
        """Restore a group and re-add it to every member's record.

        The group document is restored first; the member records are then
        brought back in line one by one. Re-adding is idempotent, so calling
        this again after a partial failure completes the restore.

        Raises:
            InvalidArgumentError: If the id is malformed
            GroupNotFoundError: If no group has this id
            GroupExistsError: If a live group took the slug in the meantime
        """
        gid = self._parse_group_id(group_id)
        group = await self._group_repository.find_one(GroupFilter(id=gid.value))
        if group is None:
            self._probe.group_not_found(gid.value)
            raise GroupNotFoundError(f"Group {gid.value} not found")

        try:
            if group.deleted:
                existing = await self._find_live_by_slug(group.slug)
                if existing is not None and existing.id != gid:
                    self._probe.group_slug_conflict(group.slug, existing.id.value)
                    raise GroupExistsError(
                        f"Group with slug '{group.slug}' already exists"
                    )
                await self._group_repository.update(
                    gid, {"deleted": False, "deleted_at": None}
                )

            for user_id in group.users:
                await self._relation_service.add_group_to_user(
                    user_id.value, gid.value
                )
        except Exception as e:
            self._probe.group_operation_failed("undelete", gid.value, str(e))
            raise
        self._probe.group_undeleted(gid.value, member_count=group.count)

    async def get_group(self, by: GroupLookup, deleted: bool = False) -> Group | None:
        """Look a group up by id, name or slug.

        Args:
            by: Exactly one lookup key
            deleted: Whether to look among deleted (True) or live (False) groups

        Returns:
            The matching Group, or None

        Raises:
            InvalidArgumentError: If the lookup or the deleted flag is invalid
        """
        if not isinstance(deleted, bool):
            raise InvalidArgumentError("deleted", "deleted must be a boolean")
        if not isinstance(by, (ById, ByName, BySlug)) or not isinstance(
            by.value, str
        ):
            raise InvalidArgumentError("by", "by must be ById, ByName or BySlug")

        if isinstance(by, ById):
            criteria = GroupFilter(
                id=self._parse_group_id(by.value, argument="by").value,
                deleted=deleted,
            )
        elif isinstance(by, ByName):
            criteria = GroupFilter(name=by.value, deleted=deleted)
        else:
            criteria = GroupFilter(slug=by.value, deleted=deleted)
        return await self._group_repository.find_one(criteria)

    async def list_groups(
        self,
        criteria: GroupFilter | None = None,
        pagination: Pagination | None = None,
    ) -> PageResult[Group]:
        """Return a page of groups matching the criteria, in insertion order."""
        return await self._group_repository.filter_many(
            criteria or GroupFilter(), pagination or Pagination()
        )
