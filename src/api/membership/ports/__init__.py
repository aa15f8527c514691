"""Ports (interfaces) for the membership bounded context.

Ports define the contracts for repositories and the domain errors without
specifying implementation details. This allows for dependency inversion
and keeps the domain layer independent of infrastructure.
"""

from membership.ports.exceptions import (
    GroupExistsError,
    GroupNotFoundError,
    InvalidArgumentError,
    InvalidDocumentError,
    MembershipError,
    UserExistsError,
    UserNotFoundError,
)
from membership.ports.repositories import IGroupRepository, IUserRepository

__all__ = [
    "GroupExistsError",
    "GroupNotFoundError",
    "IGroupRepository",
    "IUserRepository",
    "InvalidArgumentError",
    "InvalidDocumentError",
    "MembershipError",
    "UserExistsError",
    "UserNotFoundError",
]
