"""Unit tests for membership service wiring."""

from unittest.mock import MagicMock, patch

from infrastructure.settings import DatabaseSettings, Settings
from membership.dependencies import create_membership_services, create_repositories
from membership.infrastructure import (
    GroupRepository,
    InMemoryGroupRepository,
    InMemoryUserRepository,
    UserRepository,
)


class TestCreateRepositories:
    """Tests for backend selection."""

    def test_memory_backend(self):
        groups, users, engine = create_repositories(Settings(storage_backend="memory"))

        assert isinstance(groups, InMemoryGroupRepository)
        assert isinstance(users, InMemoryUserRepository)
        assert engine is None

    def test_postgres_backend(self):
        settings = Settings(storage_backend="postgres")
        database = DatabaseSettings(host="db", password="secret")

        with patch("membership.dependencies.create_engine") as create_engine:
            groups, users, engine = create_repositories(settings, database)

        create_engine.assert_called_once_with(database)
        assert engine is create_engine.return_value
        assert isinstance(groups, GroupRepository)
        assert isinstance(users, UserRepository)


class TestCreateMembershipServices:
    """Tests for create_membership_services."""

    def test_services_share_one_gateway(self):
        group_repository = InMemoryGroupRepository(probe=MagicMock())
        user_repository = InMemoryUserRepository(probe=MagicMock())

        services = create_membership_services(
            Settings(),
            group_repository=group_repository,
            user_repository=user_repository,
        )

        assert services.groups._group_repository is group_repository
        assert services.users._user_repository is user_repository
        assert services.groups._relation_service is services.relations
        assert services.reconciliation._relation_service is services.relations
        assert services.engine is None

    def test_settings_flow_into_services(self):
        services = create_membership_services(
            Settings(group_name_max_length=20, identifier_length=12)
        )

        assert services.groups._name_max_length == 20
        assert services.groups._identifier_length == 12
        assert services.relations._identifier_length == 12
