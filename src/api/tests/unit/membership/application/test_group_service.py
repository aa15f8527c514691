"""Unit tests for GroupService."""

from datetime import UTC, datetime
from unittest.mock import MagicMock, create_autospec

import pytest

from membership.application.observability import GroupServiceProbe
from membership.application.services import GroupService
from membership.domain.value_objects import (
    ById,
    ByName,
    BySlug,
    GroupFilter,
    UserFilter,
)
from membership.ports.exceptions import (
    GroupExistsError,
    GroupNotFoundError,
    InvalidArgumentError,
)
from shared_kernel.filtering import Pagination, RangeFilter

ALICE = "a" * 24
BOB = "b" * 24


@pytest.fixture
def mock_probe():
    """Create mock group service probe."""
    return create_autospec(GroupServiceProbe, instance=True)


@pytest.fixture
def service(group_repository, relation_service, mock_probe):
    return GroupService(
        group_repository=group_repository,
        relation_service=relation_service,
        probe=mock_probe,
    )


class TestCreateGroup:
    """Tests for GroupService.create_group."""

    @pytest.mark.asyncio
    async def test_creates_empty_group_with_slug(self, service, mock_probe):
        group = await service.create_group("  Admins ")

        assert group.name == "Admins"
        assert group.slug == "admins"
        assert group.users == []
        assert group.count == 0
        mock_probe.group_created.assert_called_once_with(
            group_id=group.id.value, name="Admins", slug="admins"
        )

    @pytest.mark.asyncio
    async def test_slug_collision_fails(self, service, mock_probe):
        existing = await service.create_group("Platform Team")

        with pytest.raises(GroupExistsError):
            await service.create_group("platform-team")
        mock_probe.group_slug_conflict.assert_called_once_with(
            "platform-team", existing.id.value
        )
        mock_probe.group_creation_failed.assert_called_once()

    @pytest.mark.asyncio
    async def test_slug_can_be_reused_after_delete(self, service):
        first = await service.create_group("Admins")
        await service.delete_group(first.id.value)

        second = await service.create_group("Admins")

        assert second.id != first.id
        assert second.slug == "admins"

    @pytest.mark.parametrize("name", ["", "   ", "x" * 36, None, 12])
    @pytest.mark.asyncio
    async def test_rejects_invalid_names(self, service, name):
        with pytest.raises(InvalidArgumentError) as exc_info:
            await service.create_group(name)
        assert exc_info.value.argument == "name"

    @pytest.mark.asyncio
    async def test_accepts_name_at_max_length(self, service):
        group = await service.create_group("x" * 35)
        assert group.slug == "x" * 35

    @pytest.mark.asyncio
    async def test_rejects_name_without_letters_or_digits(self, service):
        with pytest.raises(InvalidArgumentError) as exc_info:
            await service.create_group("!!!")
        assert exc_info.value.argument == "name"

    @pytest.mark.asyncio
    async def test_name_max_length_is_configurable(
        self, group_repository, relation_service
    ):
        service = GroupService(
            group_repository=group_repository,
            relation_service=relation_service,
            probe=MagicMock(),
            name_max_length=32,
        )

        with pytest.raises(InvalidArgumentError):
            await service.create_group("x" * 33)


class TestUpdateGroup:
    """Tests for GroupService.update_group."""

    @pytest.mark.asyncio
    async def test_same_slug_writes_nothing(self, service, group_repository):
        group = await service.create_group("Admins")

        await service.update_group(group.id.value, "  ADMINS ")

        stored = await group_repository.find_one(GroupFilter(id=group.id.value))
        assert stored.updated_at == group.updated_at
        assert stored.name == "Admins"

    @pytest.mark.asyncio
    async def test_new_name_bumps_updated_at(self, service, group_repository):
        group = await service.create_group("Admins")

        await service.update_group(group.id.value, "Operators")

        stored = await group_repository.find_one(GroupFilter(id=group.id.value))
        assert stored.name == "Operators"
        assert stored.slug == "operators"
        assert stored.updated_at > group.updated_at

    @pytest.mark.asyncio
    async def test_collision_with_other_live_group(self, service):
        await service.create_group("Admins")
        ops = await service.create_group("Ops")

        with pytest.raises(GroupExistsError):
            await service.update_group(ops.id.value, "admins")

    @pytest.mark.asyncio
    async def test_deleted_group_is_not_found(self, service):
        group = await service.create_group("Admins")
        await service.delete_group(group.id.value)

        with pytest.raises(GroupNotFoundError):
            await service.update_group(group.id.value, "Root")

    @pytest.mark.asyncio
    async def test_validates_group_id(self, service):
        with pytest.raises(InvalidArgumentError) as exc_info:
            await service.update_group("nope", "Root")
        assert exc_info.value.argument == "group_id"


class TestDeleteAndUndelete:
    """Tests for soft deletion and restoration."""

    @pytest.mark.asyncio
    async def test_delete_freezes_members(
        self, service, relation_service, group_repository, user_repository
    ):
        group = await service.create_group("Admins")
        await relation_service.add_user(ALICE, group.id.value)

        await service.delete_group(group.id.value)

        stored = await group_repository.find_one(GroupFilter(id=group.id.value))
        assert stored.deleted is True
        assert stored.deleted_at is not None
        assert stored.user_values() == [ALICE]
        membership = await user_repository.find_one(UserFilter(id=ALICE))
        assert membership.group_values() == [group.id.value]

    @pytest.mark.asyncio
    async def test_delete_twice_fails(self, service):
        group = await service.create_group("Admins")
        await service.delete_group(group.id.value)

        with pytest.raises(GroupNotFoundError):
            await service.delete_group(group.id.value)

    @pytest.mark.asyncio
    async def test_undelete_restores_group_and_memberships(
        self, service, relation_service, group_repository, user_repository
    ):
        group = await service.create_group("Admins")
        await relation_service.add_user(ALICE, group.id.value)
        await relation_service.add_user(BOB, group.id.value)
        await service.delete_group(group.id.value)
        # Drift while deleted: Bob's record lost the group.
        await relation_service.remove_group_from_user(BOB, group.id.value)

        await service.undelete_group(group.id.value)

        stored = await group_repository.find_one(
            GroupFilter(id=group.id.value, deleted=False)
        )
        assert stored.deleted_at is None
        assert stored.user_values() == [ALICE, BOB]
        for user_id in (ALICE, BOB):
            membership = await user_repository.find_one(
                UserFilter(id=user_id, deleted=False)
            )
            assert membership.group_values() == [group.id.value]

    @pytest.mark.asyncio
    async def test_undelete_missing_group(self, service):
        with pytest.raises(GroupNotFoundError):
            await service.undelete_group("f" * 24)

    @pytest.mark.asyncio
    async def test_undelete_fails_when_slug_was_taken(self, service, mock_probe):
        group = await service.create_group("Admins")
        await service.delete_group(group.id.value)
        await service.create_group("Admins")

        with pytest.raises(GroupExistsError):
            await service.undelete_group(group.id.value)
        mock_probe.group_operation_failed.assert_called_once()


class TestGetGroup:
    """Tests for GroupService.get_group."""

    @pytest.mark.asyncio
    async def test_lookups(self, service):
        group = await service.create_group("Platform Team")

        assert (await service.get_group(ById(group.id.value))).id == group.id
        assert (await service.get_group(ByName("Platform Team"))).id == group.id
        assert (await service.get_group(BySlug("platform-team"))).id == group.id

    @pytest.mark.asyncio
    async def test_not_found_returns_none(self, service):
        assert await service.get_group(BySlug("nope")) is None

    @pytest.mark.asyncio
    async def test_deleted_flag_selects_deleted_groups(self, service):
        group = await service.create_group("Admins")
        await service.delete_group(group.id.value)

        assert await service.get_group(ById(group.id.value)) is None
        found = await service.get_group(ById(group.id.value), deleted=True)
        assert found.id == group.id

    @pytest.mark.parametrize("by", [None, "admins", {"id": "x"}, ByName(3)])
    @pytest.mark.asyncio
    async def test_rejects_invalid_lookup(self, service, by):
        with pytest.raises(InvalidArgumentError) as exc_info:
            await service.get_group(by)
        assert exc_info.value.argument == "by"

    @pytest.mark.asyncio
    async def test_rejects_malformed_id_lookup(self, service):
        with pytest.raises(InvalidArgumentError) as exc_info:
            await service.get_group(ById("short"))
        assert exc_info.value.argument == "by"

    @pytest.mark.asyncio
    async def test_rejects_non_boolean_deleted(self, service):
        with pytest.raises(InvalidArgumentError) as exc_info:
            await service.get_group(BySlug("admins"), deleted="yes")
        assert exc_info.value.argument == "deleted"


class TestListGroups:
    """Tests for GroupService.list_groups."""

    @pytest.mark.asyncio
    async def test_filters_and_paginates(self, service, relation_service):
        groups = [await service.create_group(f"Group {i}") for i in range(5)]
        for group in groups[1:4]:
            await relation_service.add_user(ALICE, group.id.value)
        await service.delete_group(groups[2].id.value)

        page = await service.list_groups(
            GroupFilter(users=frozenset({ALICE}), deleted=False),
            Pagination(limit=1, page=2),
        )

        assert page.total == 2
        assert page.pages == 2
        assert [g.id for g in page.docs] == [groups[3].id]

    @pytest.mark.asyncio
    async def test_count_range(self, service, relation_service):
        empty = await service.create_group("Empty")
        full = await service.create_group("Full")
        await relation_service.add_user(ALICE, full.id.value)

        page = await service.list_groups(GroupFilter(count=RangeFilter(eq=0)))

        assert [g.id for g in page.docs] == [empty.id]

    @pytest.mark.asyncio
    async def test_defaults(self, service):
        for i in range(12):
            await service.create_group(f"Group {i}")

        page = await service.list_groups()

        assert len(page.docs) == 10
        assert page.total == 12
        assert page.pages == 2

    @pytest.mark.asyncio
    async def test_created_at_range(self, service):
        group = await service.create_group("Admins")

        page = await service.list_groups(
            GroupFilter(created_at=RangeFilter(gte=datetime(2020, 1, 1, tzinfo=UTC)))
        )

        assert [g.id for g in page.docs] == [group.id]

    @pytest.mark.asyncio
    async def test_naive_created_at_bound_is_rejected(self, service):
        await service.create_group("Admins")

        with pytest.raises(InvalidArgumentError) as exc_info:
            await service.list_groups(
                GroupFilter(created_at=RangeFilter(gte=datetime(2020, 1, 1)))
            )
        assert exc_info.value.argument == "gte"
