"""PostgreSQL implementation of IUserRepository.

Membership rows are addressed by user id; updates only ever touch the
user's live row. At most one live row per user is enforced by a partial
unique index; violations surface as UserExistsError.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import UTC, datetime, timedelta
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from membership.domain.aggregates import Membership
from membership.domain.value_objects import GroupId, UserFilter, UserId
from membership.infrastructure.documents import (
    USER_UPDATABLE_FIELDS,
    check_update_fields,
    user_from_document,
)
from membership.infrastructure.models import MembershipModel
from membership.infrastructure.observability import (
    DefaultRepositoryProbe,
    RepositoryProbe,
)
from membership.infrastructure.sql_filters import user_clauses
from membership.ports.exceptions import (
    InvalidDocumentError,
    UserExistsError,
    UserNotFoundError,
)
from membership.ports.repositories import IUserRepository
from shared_kernel.filtering import PageResult, Pagination, build_page, page_window


def _document(model: MembershipModel) -> dict[str, Any]:
    return {
        "id": model.user_id,
        "groups": model.groups,
        "count": model.count,
        "created_at": model.created_at,
        "updated_at": model.updated_at,
        "deleted_at": model.deleted_at,
        "deleted": model.deleted,
    }


class UserRepository(IUserRepository):
    """Membership storage gateway backed by PostgreSQL."""

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

    def _translate(self, model: MembershipModel) -> Membership:
        try:
            return user_from_document(_document(model))
        except InvalidDocumentError as e:
            self._probe.invalid_document("membership", str(e))
            raise

    async def find_one(self, criteria: UserFilter) -> Membership | None:
        stmt = (
            select(MembershipModel)
            .where(*user_clauses(criteria))
            .order_by(MembershipModel.created_at, MembershipModel.record_id)
            .limit(1)
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            model = result.scalar_one_or_none()

        if model is None:
            return None
        return self._translate(model)

    async def create(
        self, user_id: UserId, groups: Sequence[GroupId] = ()
    ) -> Membership:
        group_ids = list(dict.fromkeys(g.value for g in groups))
        now = datetime.now(UTC)
        model = MembershipModel(
            user_id=user_id.value,
            groups=group_ids,
            count=len(group_ids),
            created_at=now,
            updated_at=now,
            deleted_at=None,
            deleted=False,
        )
        try:
            async with self._session_factory.begin() as session:
                session.add(model)
        except IntegrityError as e:
            self._probe.duplicate_document("membership", user_id.value)
            raise UserExistsError(f"User {user_id.value} already exists") from e

        self._probe.document_created("membership", user_id.value)
        return self._translate(model)

    async def update(self, user_id: UserId, fields: Mapping[str, Any]) -> None:
        check_update_fields(fields, USER_UPDATABLE_FIELDS)

        values = dict(fields)
        if "updated_at" not in values:
            values["updated_at"] = func.greatest(
                func.now(), MembershipModel.updated_at + timedelta(microseconds=1)
            )
        stmt = (
            update(MembershipModel)
            .where(
                MembershipModel.user_id == user_id.value,
                MembershipModel.deleted.is_(False),
            )
            .values(**values)
        )

        async with self._session_factory.begin() as session:
            result = await session.execute(stmt)

        if result.rowcount == 0:
            self._probe.document_not_found("membership", user_id.value)
            raise UserNotFoundError(f"User {user_id.value} not found")
        self._probe.document_updated("membership", user_id.value, sorted(fields))

    async def filter_many(
        self, criteria: UserFilter, pagination: Pagination
    ) -> PageResult[Membership]:
        clauses = user_clauses(criteria)
        start, stop = page_window(pagination)

        count_stmt = select(func.count()).select_from(MembershipModel).where(*clauses)
        stmt = (
            select(MembershipModel)
            .where(*clauses)
            .order_by(MembershipModel.created_at, MembershipModel.record_id)
            .offset(start)
        )
        if stop is not None:
            stmt = stmt.limit(stop - start)

        async with self._session_factory() as session:
            matched = (await session.execute(count_stmt)).scalar_one()
            models = (await session.execute(stmt)).scalars().all()

        page = build_page([self._translate(m) for m in models], matched, pagination)
        self._probe.documents_filtered("membership", page.total, len(page.docs))
        return page
