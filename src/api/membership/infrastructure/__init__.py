"""Infrastructure layer for the membership bounded context.

Storage gateway implementations: an in-process document store and a
PostgreSQL store built on async SQLAlchemy.
"""

from membership.infrastructure.group_repository import GroupRepository
from membership.infrastructure.memory_repository import (
    InMemoryGroupRepository,
    InMemoryUserRepository,
)
from membership.infrastructure.user_repository import UserRepository

__all__ = [
    "GroupRepository",
    "InMemoryGroupRepository",
    "InMemoryUserRepository",
    "UserRepository",
]
