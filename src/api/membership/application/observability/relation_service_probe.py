"""Protocol for relation maintenance observability.

Captures both sides of every user-group edge change so a partially applied
dual write can be traced from the logs."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class RelationServiceProbe(Protocol):
    """Domain probe for relation maintenance operations."""

    def user_added_to_group(
        self, user_id: str, group_id: str, member_count: int
    ) -> None:
        """Record that the group side now lists the user."""
        ...

    def group_added_to_user(
        self, user_id: str, group_id: str, created_record: bool
    ) -> None:
        """Record that the user side now lists the group."""
        ...

    def user_removed_from_group(
        self, user_id: str, group_id: str, member_count: int
    ) -> None:
        """Record that the group side no longer lists the user."""
        ...

    def group_removed_from_user(self, user_id: str, group_id: str) -> None:
        """Record that the user side no longer lists the group."""
        ...

    def relation_unchanged(self, side: str, user_id: str, group_id: str) -> None:
        """Record that one side already had the requested state."""
        ...

    def membership_record_missing(self, user_id: str, group_id: str) -> None:
        """Record that a removal found no live membership record."""
        ...

    def relation_update_failed(
        self, operation: str, user_id: str, group_id: str, error: str
    ) -> None:
        """Record that a dual write failed, possibly after its first write."""
        ...

    def with_context(self, context: ObservationContext) -> RelationServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultRelationServiceProbe:
    """Default implementation of RelationServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultRelationServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultRelationServiceProbe(logger=self._logger, context=context)

    def user_added_to_group(
        self, user_id: str, group_id: str, member_count: int
    ) -> None:
        self._logger.info(
            "user_added_to_group",
            user_id=user_id,
            group_id=group_id,
            member_count=member_count,
            **self._get_context_kwargs(),
        )

    def group_added_to_user(
        self, user_id: str, group_id: str, created_record: bool
    ) -> None:
        self._logger.info(
            "group_added_to_user",
            user_id=user_id,
            group_id=group_id,
            created_record=created_record,
            **self._get_context_kwargs(),
        )

    def user_removed_from_group(
        self, user_id: str, group_id: str, member_count: int
    ) -> None:
        self._logger.info(
            "user_removed_from_group",
            user_id=user_id,
            group_id=group_id,
            member_count=member_count,
            **self._get_context_kwargs(),
        )

    def group_removed_from_user(self, user_id: str, group_id: str) -> None:
        self._logger.info(
            "group_removed_from_user",
            user_id=user_id,
            group_id=group_id,
            **self._get_context_kwargs(),
        )

    def relation_unchanged(self, side: str, user_id: str, group_id: str) -> None:
        self._logger.debug(
            "relation_unchanged",
            side=side,
            user_id=user_id,
            group_id=group_id,
            **self._get_context_kwargs(),
        )

    def membership_record_missing(self, user_id: str, group_id: str) -> None:
        self._logger.warning(
            "membership_record_missing",
            user_id=user_id,
            group_id=group_id,
            **self._get_context_kwargs(),
        )

    def relation_update_failed(
        self, operation: str, user_id: str, group_id: str, error: str
    ) -> None:
        self._logger.error(
            "relation_update_failed",
            operation=operation,
            user_id=user_id,
            group_id=group_id,
            error=error,
            **self._get_context_kwargs(),
        )
