"""PostgreSQL implementation of IGroupRepository.

Each call runs in its own short transaction, which gives exactly the
single-document atomicity the services rely on and nothing more. Live slug
uniqueness is enforced by a partial unique index; violations surface as
GroupExistsError.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime, timedelta
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from membership.domain.aggregates import Group
from membership.domain.value_objects import GroupFilter, GroupId
from membership.infrastructure.documents import (
    GROUP_UPDATABLE_FIELDS,
    check_update_fields,
    group_from_document,
)
from membership.infrastructure.models import GroupModel
from membership.infrastructure.observability import (
    DefaultRepositoryProbe,
    RepositoryProbe,
)
from membership.infrastructure.sql_filters import group_clauses
from membership.ports.exceptions import (
    GroupExistsError,
    GroupNotFoundError,
    InvalidDocumentError,
)
from membership.ports.repositories import IGroupRepository
from shared_kernel.filtering import PageResult, Pagination, build_page, page_window


def _document(model: GroupModel) -> dict[str, Any]:
    return {
        "id": model.id,
        "name": model.name,
        "slug": model.slug,
        "users": model.users,
        "count": model.count,
        "created_at": model.created_at,
        "updated_at": model.updated_at,
        "deleted_at": model.deleted_at,
        "deleted": model.deleted,
    }


class GroupRepository(IGroupRepository):
    """Group storage gateway backed by PostgreSQL."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        probe: RepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with a session factory.

        Args:
            session_factory: Factory producing one session per gateway call
            probe: Optional domain probe for observability
        """
        self._session_factory = session_factory
        self._probe = probe or DefaultRepositoryProbe()

    def _translate(self, model: GroupModel) -> Group:
        try:
            return group_from_document(_document(model))
        except InvalidDocumentError as e:
            self._probe.invalid_document("group", str(e))
            raise

    async def find_one(self, criteria: GroupFilter) -> Group | None:
        stmt = (
            select(GroupModel)
            .where(*group_clauses(criteria))
            .order_by(GroupModel.created_at, GroupModel.id)
            .limit(1)
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            model = result.scalar_one_or_none()

        if model is None:
            return None
        return self._translate(model)

    async def create(self, name: str, slug: str) -> Group:
        now = datetime.now(UTC)
        model = GroupModel(
            id=GroupId.generate().value,
            name=name,
            slug=slug,
            users=[],
            count=0,
            created_at=now,
            updated_at=now,
            deleted_at=None,
            deleted=False,
        )
        try:
            async with self._session_factory.begin() as session:
                session.add(model)
        except IntegrityError as e:
            self._probe.duplicate_document("group", slug)
            raise GroupExistsError(f"Group with slug '{slug}' already exists") from e

        self._probe.document_created("group", model.id)
        return self._translate(model)

    async def update(self, group_id: GroupId, fields: Mapping[str, Any]) -> None:
        check_update_fields(fields, GROUP_UPDATABLE_FIELDS)

        values = dict(fields)
        if "updated_at" not in values:
            values["updated_at"] = func.greatest(
                func.now(), GroupModel.updated_at + timedelta(microseconds=1)
            )
        stmt = (
            update(GroupModel).where(GroupModel.id == group_id.value).values(**values)
        )

        try:
            async with self._session_factory.begin() as session:
                result = await session.execute(stmt)
        except IntegrityError as e:
            if "slug" in fields:
                key = str(fields["slug"])
                message = f"Group with slug '{key}' already exists"
            else:
                key = group_id.value
                message = f"Group {key} clashes with a live group of the same slug"
            self._probe.duplicate_document("group", key)
            raise GroupExistsError(message) from e

        if result.rowcount == 0:
            self._probe.document_not_found("group", group_id.value)
            raise GroupNotFoundError(f"Group {group_id.value} not found")
        self._probe.document_updated("group", group_id.value, sorted(fields))

    async def filter_many(
        self, criteria: GroupFilter, pagination: Pagination
    ) -> PageResult[Group]:
        clauses = group_clauses(criteria)
        start, stop = page_window(pagination)

        count_stmt = select(func.count()).select_from(GroupModel).where(*clauses)
        stmt = (
            select(GroupModel)
            .where(*clauses)
            .order_by(GroupModel.created_at, GroupModel.id)
            .offset(start)
        )
        if stop is not None:
            stmt = stmt.limit(stop - start)

        async with self._session_factory() as session:
            matched = (await session.execute(count_stmt)).scalar_one()
            models = (await session.execute(stmt)).scalars().all()

        page = build_page([self._translate(m) for m in models], matched, pagination)
        self._probe.documents_filtered("group", page.total, len(page.docs))
        return page
