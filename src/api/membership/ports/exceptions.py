"""Domain exceptions for the membership bounded context.

These exceptions are raised to the immediate caller; the request-handling
layer is responsible for translating them into protocol-level errors.
"""

from shared_kernel.exceptions import InvalidArgumentError


class MembershipError(Exception):
    """Base class for membership domain errors."""

    pass


class GroupNotFoundError(MembershipError):
    """Raised when a referenced group does not exist.

    Also raised when the group is soft-deleted and a live group was required.
    """

    pass


class UserNotFoundError(MembershipError):
    """Raised when a referenced user has no live membership record."""

    pass


class GroupExistsError(MembershipError):
    """Raised when a live group already uses the slug of the requested name.

    Slugs are the uniqueness key of live groups; soft-deleted groups do not
    take part in the check.
    """

    pass


class UserExistsError(MembershipError):
    """Raised when creating a membership record for a user that has a live one."""

    pass


class InvalidDocumentError(MembershipError):
    """Raised when a stored record does not have the expected entity shape.

    Checked at the boundary where stored records are translated into
    aggregates.
    """

    pass


__all__ = [
    "GroupExistsError",
    "GroupNotFoundError",
    "InvalidArgumentError",
    "InvalidDocumentError",
    "MembershipError",
    "UserExistsError",
    "UserNotFoundError",
]
