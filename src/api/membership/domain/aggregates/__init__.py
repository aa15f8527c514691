"""Aggregates for the membership domain."""

from membership.domain.aggregates.group import Group
from membership.domain.aggregates.membership import Membership

__all__ = ["Group", "Membership"]
