"""End-to-end group and membership lifecycle against the in-memory gateway."""

import pytest

from infrastructure.settings import Settings
from membership.dependencies import create_membership_services
from membership.domain.value_objects import ById, BySlug
from membership.ports.exceptions import GroupExistsError

U1 = "1" * 24


@pytest.fixture
def services():
    return create_membership_services(Settings(storage_backend="memory"))


class TestGroupLifecycle:
    """Group creation, membership and deletion as seen by a caller."""

    @pytest.mark.asyncio
    async def test_admins_scenario(self, services):
        admins = await services.groups.create_group("Admins")
        assert admins.slug == "admins"
        assert admins.count == 0

        await services.relations.add_user(U1, admins.id.value)

        group = await services.groups.get_group(ById(admins.id.value))
        assert group.user_values() == [U1]
        assert group.count == 1
        membership = await services.users.get_user(U1)
        assert membership.group_values() == [admins.id.value]
        assert membership.count == 1

        await services.groups.delete_group(admins.id.value)

        assert await services.groups.get_group(ById(admins.id.value)) is None
        deleted = await services.groups.get_group(ById(admins.id.value), deleted=True)
        assert deleted.deleted is True

    @pytest.mark.asyncio
    async def test_slug_uniqueness_among_live_groups(self, services):
        first = await services.groups.create_group("Data Science")

        with pytest.raises(GroupExistsError):
            await services.groups.create_group("data   science")

        await services.groups.delete_group(first.id.value)
        second = await services.groups.create_group("data   science")

        live = await services.groups.get_group(BySlug("data-science"))
        assert live.id == second.id

    @pytest.mark.asyncio
    async def test_reconciliation_is_clean_after_normal_use(self, services):
        group = await services.groups.create_group("Admins")
        await services.relations.add_user(U1, group.id.value)
        await services.users.delete_user(U1)

        assert await services.reconciliation.audit() == []
