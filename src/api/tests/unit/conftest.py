"""Unit test fixtures for the membership service."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from membership.application.services import (
    GroupService,
    ReconciliationService,
    RelationService,
    UserService,
)
from membership.infrastructure import InMemoryGroupRepository, InMemoryUserRepository


@pytest.fixture
def group_repository() -> InMemoryGroupRepository:
    """Provide an empty in-memory group gateway."""
    return InMemoryGroupRepository(probe=MagicMock())


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    """Provide an empty in-memory membership gateway."""
    return InMemoryUserRepository(probe=MagicMock())


@pytest.fixture
def relation_service(group_repository, user_repository) -> RelationService:
    """Create RelationService over the in-memory gateway."""
    return RelationService(
        group_repository=group_repository,
        user_repository=user_repository,
        probe=MagicMock(),
    )


@pytest.fixture
def group_service(group_repository, relation_service) -> GroupService:
    """Create GroupService over the in-memory gateway."""
    return GroupService(
        group_repository=group_repository,
        relation_service=relation_service,
        probe=MagicMock(),
    )


@pytest.fixture
def user_service(user_repository, group_repository, relation_service) -> UserService:
    """Create UserService over the in-memory gateway."""
    return UserService(
        user_repository=user_repository,
        group_repository=group_repository,
        relation_service=relation_service,
        probe=MagicMock(),
    )


@pytest.fixture
def reconciliation_service(
    group_repository, user_repository, relation_service
) -> ReconciliationService:
    """Create ReconciliationService over the in-memory gateway."""
    return ReconciliationService(
        group_repository=group_repository,
        user_repository=user_repository,
        relation_service=relation_service,
        probe=MagicMock(),
    )


@pytest.fixture
def mock_session():
    """Create mock async session."""
    session = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def mock_session_factory(mock_session):
    """Create a mock async_sessionmaker yielding ``mock_session``.

    Supports both ``async with factory()`` and ``async with factory.begin()``.
    """

    def context():
        ctx = MagicMock()
        ctx.__aenter__ = AsyncMock(return_value=mock_session)
        ctx.__aexit__ = AsyncMock(return_value=None)
        return ctx

    factory = MagicMock(side_effect=lambda: context())
    factory.begin = MagicMock(side_effect=lambda: context())
    return factory
