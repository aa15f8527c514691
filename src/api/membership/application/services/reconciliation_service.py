"""Reconciliation of the user-group relation.

Edges are written to two documents without a transaction, so a failure
between the two writes leaves an edge recorded on one side only. This
service finds such asymmetric edges between live groups and live
membership records and repairs them from the group side.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime

from membership.application.observability import (
    DefaultReconciliationProbe,
    ReconciliationProbe,
)
from membership.application.services.relation_service import RelationService
from membership.domain.value_objects import EdgeDiscrepancy, GroupFilter, UserFilter
from membership.ports.repositories import IGroupRepository, IUserRepository
from shared_kernel.filtering import Pagination


class ReconciliationService:
    """Audits and repairs asymmetric user-group edges.

    The group document is authoritative: an edge listed only by a live
    group is added to the user's record, and an edge listed only by a
    user's record is removed from it. Memberships pointing at deleted or
    missing groups are left alone, since deletion freezes both sides.
    """

    def __init__(
        self,
        group_repository: IGroupRepository,
        user_repository: IUserRepository,
        relation_service: RelationService,
        probe: ReconciliationProbe | None = None,
    ):
        self._group_repository = group_repository
        self._user_repository = user_repository
        self._relation_service = relation_service
        self._probe = probe or DefaultReconciliationProbe()

    async def audit(self) -> list[EdgeDiscrepancy]:
        """Scan all live groups and memberships for one-sided edges.

        Returns:
            Discrepancies ordered by (user id, group id)
        """
        groups = (
            await self._group_repository.filter_many(
                GroupFilter(deleted=False), Pagination.unbounded()
            )
        ).docs
        memberships = (
            await self._user_repository.filter_many(
                UserFilter(deleted=False), Pagination.unbounded()
            )
        ).docs

        live_group_ids = {group.id.value for group in groups}
        by_group = {
            (user_id.value, group.id.value)
            for group in groups
            for user_id in group.users
        }
        by_user = {
            (membership.id.value, group_id.value)
            for membership in memberships
            for group_id in membership.groups
            if group_id.value in live_group_ids
        }

        detected_at = datetime.now(UTC)
        discrepancies = [
            EdgeDiscrepancy(
                user_id=user_id,
                group_id=group_id,
                listed_by_group=(user_id, group_id) in by_group,
                listed_by_user=(user_id, group_id) in by_user,
                detected_at=detected_at,
            )
            for user_id, group_id in sorted(by_group ^ by_user)
        ]
        self._probe.audit_completed(
            groups_scanned=len(groups),
            memberships_scanned=len(memberships),
            discrepancies=len(discrepancies),
        )
        return discrepancies

    async def repair(self, discrepancies: Iterable[EdgeDiscrepancy]) -> int:
        """Bring the membership side of each edge in line with the group side.

        Each repair re-reads the documents it touches, so repairing an edge
        that was fixed in the meantime is a no-op.

        Returns:
            Number of discrepancies processed
        """
        repaired = 0
        for discrepancy in discrepancies:
            try:
                if discrepancy.listed_by_group:
                    action = "add_group_to_user"
                    await self._relation_service.add_group_to_user(
                        discrepancy.user_id, discrepancy.group_id
                    )
                else:
                    action = "remove_group_from_user"
                    await self._relation_service.remove_group_from_user(
                        discrepancy.user_id, discrepancy.group_id
                    )
            except Exception as e:
                self._probe.repair_failed(
                    discrepancy.user_id, discrepancy.group_id, str(e)
                )
                raise
            self._probe.relation_repaired(
                discrepancy.user_id, discrepancy.group_id, action
            )
            repaired += 1
        return repaired

    async def reconcile(self) -> list[EdgeDiscrepancy]:
        """Audit and repair in one pass.

        Returns:
            The discrepancies that were found and repaired
        """
        discrepancies = await self.audit()
        await self.repair(discrepancies)
        return discrepancies
