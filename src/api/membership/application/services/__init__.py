"""Application services for the membership bounded context."""

from membership.application.services.group_service import GroupService
from membership.application.services.reconciliation_service import (
    ReconciliationService,
)
from membership.application.services.relation_service import RelationService
from membership.application.services.user_service import UserService

__all__ = [
    "GroupService",
    "ReconciliationService",
    "RelationService",
    "UserService",
]
