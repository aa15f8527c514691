"""Group aggregate for the membership context."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from membership.domain.value_objects import GroupId, UserId


@dataclass
class Group:
    """Group aggregate: a named collection of users.

    The member list is denormalized on the group document and mirrored on
    each user's membership record. The group side is authoritative when the
    two disagree.

    Business rules:
    - ``users`` holds no duplicates and ``count == len(users)``
    - ``deleted`` is True exactly when ``deleted_at`` is set
    - Live groups have unique slugs
    """

    id: GroupId
    name: str
    slug: str
    created_at: datetime
    updated_at: datetime
    users: list[UserId] = field(default_factory=list)
    count: int = 0
    deleted_at: datetime | None = None
    deleted: bool = False

    def has_user(self, user_id: UserId) -> bool:
        """Check if a user is listed as a member."""
        return user_id in self.users

    def add_user(self, user_id: UserId) -> bool:
        """Add a user to the member set.

        Returns:
            True if the set changed, False if the user was already listed
        """
        if self.has_user(user_id):
            return False
        self.users = [*self.users, user_id]
        self.count = len(self.users)
        return True

    def remove_user(self, user_id: UserId) -> bool:
        """Remove a user from the member set.

        Returns:
            True if the set changed, False if the user was not listed
        """
        if not self.has_user(user_id):
            return False
        self.users = [u for u in self.users if u != user_id]
        self.count = len(self.users)
        return True

    def user_values(self) -> list[str]:
        """Member ids as stored strings, in insertion order."""
        return [u.value for u in self.users]
