"""In-process implementation of the membership storage gateway.

Documents live in insertion-ordered lists of plain mappings, the same shape a
document store would return. Every call reads and writes without yielding to
the event loop, so each call is atomic for its single document and nothing
spans two documents. Filtering and pagination run through the shared
filter engine.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import replace
from datetime import UTC, datetime
from typing import Any

from membership.domain.aggregates import Group, Membership
from membership.domain.value_objects import GroupFilter, GroupId, UserFilter, UserId
from membership.infrastructure.documents import (
    GROUP_UPDATABLE_FIELDS,
    USER_UPDATABLE_FIELDS,
    check_update_fields,
    group_from_document,
    next_updated_at,
    user_from_document,
)
from membership.infrastructure.observability import (
    DefaultRepositoryProbe,
    RepositoryProbe,
)
from membership.ports.exceptions import (
    GroupExistsError,
    GroupNotFoundError,
    InvalidDocumentError,
    UserExistsError,
    UserNotFoundError,
)
from membership.ports.repositories import IGroupRepository, IUserRepository
from shared_kernel.filtering import (
    PageResult,
    Pagination,
    Predicate,
    criteria_predicate,
    filter_items,
    paginate,
)


def _stored(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Copy field values so stored documents never alias caller state."""
    return {
        key: list(value) if isinstance(value, (list, tuple)) else value
        for key, value in fields.items()
    }


def group_predicate(criteria: GroupFilter) -> Predicate:
    """Build the document predicate for group criteria."""
    return criteria_predicate(
        exact_fields={
            "id": criteria.id,
            "name": criteria.name,
            "slug": criteria.slug,
            "deleted": criteria.deleted,
        },
        ranges={
            "count": criteria.count,
            "created_at": criteria.created_at,
            "updated_at": criteria.updated_at,
            "deleted_at": criteria.deleted_at,
        },
        overlap_fields={"users": criteria.users},
    )


def user_predicate(criteria: UserFilter) -> Predicate:
    """Build the document predicate for membership criteria."""
    return criteria_predicate(
        exact_fields={"id": criteria.id, "deleted": criteria.deleted},
        ranges={
            "count": criteria.count,
            "created_at": criteria.created_at,
            "updated_at": criteria.updated_at,
            "deleted_at": criteria.deleted_at,
        },
        overlap_fields={"groups": criteria.groups},
    )


class InMemoryGroupRepository(IGroupRepository):
    """Group storage gateway backed by an in-process document list."""

    def __init__(
        self,
        documents: Iterable[Mapping[str, Any]] = (),
        probe: RepositoryProbe | None = None,
    ) -> None:
        """Initialize the repository.

        Args:
            documents: Initial group documents, in insertion order
            probe: Optional domain probe for observability
        """
        self._documents: list[dict[str, Any]] = [_stored(d) for d in documents]
        self._probe = probe or DefaultRepositoryProbe()

    def _translate(self, document: Mapping[str, Any]) -> Group:
        try:
            return group_from_document(document)
        except InvalidDocumentError as e:
            self._probe.invalid_document("group", str(e))
            raise

    def _slug_taken(self, slug: str, exclude: Mapping[str, Any] | None = None) -> bool:
        return any(
            doc is not exclude and not doc.get("deleted") and doc.get("slug") == slug
            for doc in self._documents
        )

    async def find_one(self, criteria: GroupFilter) -> Group | None:
        predicate = group_predicate(criteria)
        for document in self._documents:
            if predicate(document):
                return self._translate(document)
        return None

    async def create(self, name: str, slug: str) -> Group:
        if self._slug_taken(slug):
            self._probe.duplicate_document("group", slug)
            raise GroupExistsError(f"Group with slug '{slug}' already exists")

        now = datetime.now(UTC)
        document: dict[str, Any] = {
            "id": GroupId.generate().value,
            "name": name,
            "slug": slug,
            "users": [],
            "count": 0,
            "created_at": now,
            "updated_at": now,
            "deleted_at": None,
            "deleted": False,
        }
        self._documents.append(document)
        self._probe.document_created("group", document["id"])
        return self._translate(document)

    async def update(self, group_id: GroupId, fields: Mapping[str, Any]) -> None:
        check_update_fields(fields, GROUP_UPDATABLE_FIELDS)

        document = next(
            (d for d in self._documents if d.get("id") == group_id.value), None
        )
        if document is None:
            self._probe.document_not_found("group", group_id.value)
            raise GroupNotFoundError(f"Group {group_id.value} not found")

        changes = _stored(fields)
        slug = changes.get("slug", document.get("slug"))
        live = not changes.get("deleted", document.get("deleted"))
        if live and self._slug_taken(slug, exclude=document):
            self._probe.duplicate_document("group", slug)
            raise GroupExistsError(f"Group with slug '{slug}' already exists")

        if "updated_at" not in changes:
            changes["updated_at"] = next_updated_at(document.get("updated_at"))
        document.update(changes)
        self._probe.document_updated("group", group_id.value, sorted(fields))

    async def filter_many(
        self, criteria: GroupFilter, pagination: Pagination
    ) -> PageResult[Group]:
        matched = filter_items(self._documents, group_predicate(criteria))
        page = paginate(matched, pagination)
        self._probe.documents_filtered("group", page.total, len(page.docs))
        return replace(page, docs=[self._translate(d) for d in page.docs])


class InMemoryUserRepository(IUserRepository):
    """Membership storage gateway backed by an in-process document list."""

    def __init__(
        self,
        documents: Iterable[Mapping[str, Any]] = (),
        probe: RepositoryProbe | None = None,
    ) -> None:
        """Initialize the repository.

        Args:
            documents: Initial membership documents, in insertion order
            probe: Optional domain probe for observability
        """
        self._documents: list[dict[str, Any]] = [_stored(d) for d in documents]
        self._probe = probe or DefaultRepositoryProbe()

    def _translate(self, document: Mapping[str, Any]) -> Membership:
        try:
            return user_from_document(document)
        except InvalidDocumentError as e:
            self._probe.invalid_document("membership", str(e))
            raise

    def _live(self, user_id: str) -> dict[str, Any] | None:
        return next(
            (
                d
                for d in self._documents
                if d.get("id") == user_id and not d.get("deleted")
            ),
            None,
        )

    async def find_one(self, criteria: UserFilter) -> Membership | None:
        predicate = user_predicate(criteria)
        for document in self._documents:
            if predicate(document):
                return self._translate(document)
        return None

    async def create(
        self, user_id: UserId, groups: Sequence[GroupId] = ()
    ) -> Membership:
        if self._live(user_id.value) is not None:
            self._probe.duplicate_document("membership", user_id.value)
            raise UserExistsError(f"User {user_id.value} already exists")

        group_ids = list(dict.fromkeys(g.value for g in groups))
        now = datetime.now(UTC)
        document: dict[str, Any] = {
            "id": user_id.value,
            "groups": group_ids,
            "count": len(group_ids),
            "created_at": now,
            "updated_at": now,
            "deleted_at": None,
            "deleted": False,
        }
        self._documents.append(document)
        self._probe.document_created("membership", user_id.value)
        return self._translate(document)

    async def update(self, user_id: UserId, fields: Mapping[str, Any]) -> None:
        check_update_fields(fields, USER_UPDATABLE_FIELDS)

        document = self._live(user_id.value)
        if document is None:
            self._probe.document_not_found("membership", user_id.value)
            raise UserNotFoundError(f"User {user_id.value} not found")

        changes = _stored(fields)
        if "updated_at" not in changes:
            changes["updated_at"] = next_updated_at(document.get("updated_at"))
        document.update(changes)
        self._probe.document_updated("membership", user_id.value, sorted(fields))

    async def filter_many(
        self, criteria: UserFilter, pagination: Pagination
    ) -> PageResult[Membership]:
        matched = filter_items(self._documents, user_predicate(criteria))
        page = paginate(matched, pagination)
        self._probe.documents_filtered("membership", page.total, len(page.docs))
        return replace(page, docs=[self._translate(d) for d in page.docs])
