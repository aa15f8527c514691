"""SQLAlchemy ORM models for the membership bounded context."""

from membership.infrastructure.models.group import GroupModel
from membership.infrastructure.models.membership import MembershipModel

__all__ = ["GroupModel", "MembershipModel"]
