"""Composition root for the membership bounded context.

Wires the storage gateway selected by configuration into the application
services.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncEngine

from infrastructure.database import create_engine, create_session_factory
from infrastructure.settings import DatabaseSettings, Settings, get_settings
from membership.application.services import (
    GroupService,
    ReconciliationService,
    RelationService,
    UserService,
)
from membership.infrastructure import (
    GroupRepository,
    InMemoryGroupRepository,
    InMemoryUserRepository,
    UserRepository,
)
from membership.ports.repositories import IGroupRepository, IUserRepository


@dataclass(frozen=True)
class MembershipServices:
    """The wired services of the membership context.

    Attributes:
        groups: Group lifecycle service
        users: User lifecycle service
        relations: User-group edge maintenance
        reconciliation: Audit and repair of one-sided edges
        engine: Database engine when the PostgreSQL backend is used
    """

    groups: GroupService
    users: UserService
    relations: RelationService
    reconciliation: ReconciliationService
    engine: AsyncEngine | None = None


def create_repositories(
    settings: Settings,
    database_settings: DatabaseSettings | None = None,
) -> tuple[IGroupRepository, IUserRepository, AsyncEngine | None]:
    """Create the storage gateway for the configured backend.

    Returns:
        Tuple of (group repository, user repository, engine); the engine
        is None for the in-memory backend
    """
    if settings.storage_backend == "memory":
        return InMemoryGroupRepository(), InMemoryUserRepository(), None

    engine = create_engine(database_settings or settings.database)
    session_factory = create_session_factory(engine)
    return (
        GroupRepository(session_factory=session_factory),
        UserRepository(session_factory=session_factory),
        engine,
    )


def create_membership_services(
    settings: Settings | None = None,
    group_repository: IGroupRepository | None = None,
    user_repository: IUserRepository | None = None,
) -> MembershipServices:
    """Build the membership services.

    Args:
        settings: Application settings (defaults to the cached settings)
        group_repository: Group gateway to use instead of the configured one
        user_repository: User gateway to use instead of the configured one

    Returns:
        MembershipServices sharing one gateway
    """
    settings = settings or get_settings()
    engine = None
    if group_repository is None or user_repository is None:
        groups, users, engine = create_repositories(settings)
        group_repository = group_repository or groups
        user_repository = user_repository or users

    relations = RelationService(
        group_repository=group_repository,
        user_repository=user_repository,
        identifier_length=settings.identifier_length,
    )
    return MembershipServices(
        groups=GroupService(
            group_repository=group_repository,
            relation_service=relations,
            name_max_length=settings.group_name_max_length,
            identifier_length=settings.identifier_length,
        ),
        users=UserService(
            user_repository=user_repository,
            group_repository=group_repository,
            relation_service=relations,
        ),
        relations=relations,
        reconciliation=ReconciliationService(
            group_repository=group_repository,
            user_repository=user_repository,
            relation_service=relations,
        ),
        engine=engine,
    )
