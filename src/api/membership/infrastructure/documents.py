"""Translation between stored documents and aggregates.

Every repository reads records through this module, so it is the single
place where a stored record is checked against the expected entity shape.
Documents are plain mappings with ids stored as strings.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import UTC, datetime, timedelta
from typing import Any

from membership.domain.aggregates import Group, Membership
from membership.domain.value_objects import GroupId, UserId
from membership.ports.exceptions import InvalidArgumentError, InvalidDocumentError

GROUP_UPDATABLE_FIELDS = frozenset(
    {"name", "slug", "users", "count", "deleted", "deleted_at", "updated_at"}
)
USER_UPDATABLE_FIELDS = frozenset(
    {"groups", "count", "deleted", "deleted_at", "updated_at"}
)


def check_update_fields(fields: Mapping[str, Any], allowed: Iterable[str]) -> None:
    """Reject partial updates naming fields outside ``allowed``.

    Raises:
        InvalidArgumentError: If an unknown or immutable field is named
    """
    unknown = sorted(set(fields) - set(allowed))
    if unknown:
        raise InvalidArgumentError(
            "fields", f"Cannot update field(s): {', '.join(unknown)}"
        )


def next_updated_at(previous: datetime | None) -> datetime:
    """Return a timestamp strictly after ``previous`` (now when possible)."""
    now = datetime.now(UTC)
    if previous is None or now > previous:
        return now
    return previous + timedelta(microseconds=1)


def _require(doc: Mapping[str, Any], key: str, kind: type | tuple[type, ...]) -> Any:
    if key not in doc:
        raise InvalidDocumentError(f"Document is missing field '{key}'")
    value = doc[key]
    if not isinstance(value, kind):
        raise InvalidDocumentError(
            f"Field '{key}' has unexpected type {type(value).__name__}"
        )
    return value


def _require_ids(doc: Mapping[str, Any], key: str) -> list[str]:
    values = _require(doc, key, (list, tuple))
    if not all(isinstance(v, str) for v in values):
        raise InvalidDocumentError(f"Field '{key}' must contain only string ids")
    return list(values)


def _require_count(doc: Mapping[str, Any]) -> int:
    count = _require(doc, "count", int)
    if isinstance(count, bool):
        raise InvalidDocumentError("Field 'count' has unexpected type bool")
    return count


def group_from_document(doc: Mapping[str, Any]) -> Group:
    """Build a Group aggregate from a stored group document.

    Raises:
        InvalidDocumentError: If the document does not have the group shape
    """
    if not isinstance(doc, Mapping):
        raise InvalidDocumentError("Group document must be a mapping")
    return Group(
        id=GroupId(value=_require(doc, "id", str)),
        name=_require(doc, "name", str),
        slug=_require(doc, "slug", str),
        users=[UserId(value=u) for u in _require_ids(doc, "users")],
        count=_require_count(doc),
        created_at=_require(doc, "created_at", datetime),
        updated_at=_require(doc, "updated_at", datetime),
        deleted_at=_require(doc, "deleted_at", (datetime, type(None))),
        deleted=_require(doc, "deleted", bool),
    )


def user_from_document(doc: Mapping[str, Any]) -> Membership:
    """Build a Membership aggregate from a stored membership document.

    Raises:
        InvalidDocumentError: If the document does not have the membership shape
    """
    if not isinstance(doc, Mapping):
        raise InvalidDocumentError("Membership document must be a mapping")
    return Membership(
        id=UserId(value=_require(doc, "id", str)),
        groups=[GroupId(value=g) for g in _require_ids(doc, "groups")],
        count=_require_count(doc),
        created_at=_require(doc, "created_at", datetime),
        updated_at=_require(doc, "updated_at", datetime),
        deleted_at=_require(doc, "deleted_at", (datetime, type(None))),
        deleted=_require(doc, "deleted", bool),
    )
