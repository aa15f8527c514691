"""Protocol for relation reconciliation observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ReconciliationProbe(Protocol):
    """Domain probe for relation audit and repair passes."""

    def audit_completed(
        self, groups_scanned: int, memberships_scanned: int, discrepancies: int
    ) -> None:
        """Record the outcome of an audit pass."""
        ...

    def relation_repaired(self, user_id: str, group_id: str, action: str) -> None:
        """Record that an asymmetric edge was repaired."""
        ...

    def repair_failed(self, user_id: str, group_id: str, error: str) -> None:
        """Record that repairing an edge failed."""
        ...

    def with_context(self, context: ObservationContext) -> ReconciliationProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultReconciliationProbe:
    """Default implementation of ReconciliationProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultReconciliationProbe:
        """Create a new probe with observation context bound."""
        return DefaultReconciliationProbe(logger=self._logger, context=context)

    def audit_completed(
        self, groups_scanned: int, memberships_scanned: int, discrepancies: int
    ) -> None:
        log = self._logger.warning if discrepancies else self._logger.info
        log(
            "relation_audit_completed",
            groups_scanned=groups_scanned,
            memberships_scanned=memberships_scanned,
            discrepancies=discrepancies,
            **self._get_context_kwargs(),
        )

    def relation_repaired(self, user_id: str, group_id: str, action: str) -> None:
        self._logger.info(
            "relation_repaired",
            user_id=user_id,
            group_id=group_id,
            action=action,
            **self._get_context_kwargs(),
        )

    def repair_failed(self, user_id: str, group_id: str, error: str) -> None:
        self._logger.error(
            "relation_repair_failed",
            user_id=user_id,
            group_id=group_id,
            error=error,
            **self._get_context_kwargs(),
        )
