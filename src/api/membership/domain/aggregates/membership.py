"""Membership aggregate: the stored record of a user's groups."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from membership.domain.value_objects import GroupId, UserId


@dataclass
class Membership:
    """Membership record of a single user (the "user" document).

    Created lazily the first time a group references the user, or
    explicitly through the user service. ``groups`` is a derived index of
    the groups that list this user.

    Business rules:
    - ``groups`` holds no duplicates and ``count == len(groups)``
    - At most one live (non-deleted) record exists per user id
    """

    id: UserId
    created_at: datetime
    updated_at: datetime
    groups: list[GroupId] = field(default_factory=list)
    count: int = 0
    deleted_at: datetime | None = None
    deleted: bool = False

    def has_group(self, group_id: GroupId) -> bool:
        """Check if a group is listed."""
        return group_id in self.groups

    def add_group(self, group_id: GroupId) -> bool:
        """Add a group to the set; True if the set changed."""
        if self.has_group(group_id):
            return False
        self.groups = [*self.groups, group_id]
        self.count = len(self.groups)
        return True

    def remove_group(self, group_id: GroupId) -> bool:
        """Remove a group from the set; True if the set changed."""
        if not self.has_group(group_id):
            return False
        self.groups = [g for g in self.groups if g != group_id]
        self.count = len(self.groups)
        return True

    def group_values(self) -> list[str]:
        """Group ids as stored strings, in insertion order."""
        return [g.value for g in self.groups]
