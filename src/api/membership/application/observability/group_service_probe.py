"""Protocol for group application service observability.

Defines the interface for domain probes that capture application-level
domain events for group lifecycle operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class GroupServiceProbe(Protocol):
    """Domain probe for group application service operations."""

    def group_created(self, group_id: str, name: str, slug: str) -> None:
        """Record that a group was created."""
        ...

    def group_creation_failed(self, name: str, error: str) -> None:
        """Record that group creation failed."""
        ...

    def group_slug_conflict(self, slug: str, existing_group_id: str) -> None:
        """Record that a live group already uses the slug."""
        ...

    def group_renamed(self, group_id: str, old_slug: str, new_slug: str) -> None:
        """Record that a group was renamed."""
        ...

    def group_rename_skipped(self, group_id: str, slug: str) -> None:
        """Record that an update kept the slug and wrote nothing."""
        ...

    def group_deleted(self, group_id: str, member_count: int) -> None:
        """Record that a group was soft-deleted."""
        ...

    def group_undeleted(self, group_id: str, member_count: int) -> None:
        """Record that a group was restored."""
        ...

    def group_not_found(self, group_id: str) -> None:
        """Record that a referenced group was missing."""
        ...

    def group_operation_failed(self, operation: str, group_id: str, error: str) -> None:
        """Record that a group operation failed."""
        ...

    def with_context(self, context: ObservationContext) -> GroupServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultGroupServiceProbe:
    """Default implementation of GroupServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultGroupServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultGroupServiceProbe(logger=self._logger, context=context)

    def group_created(self, group_id: str, name: str, slug: str) -> None:
        """Record that a group was created."""
        self._logger.info(
            "group_created",
            group_id=group_id,
            name=name,
            slug=slug,
            **self._get_context_kwargs(),
        )

    def group_creation_failed(self, name: str, error: str) -> None:
        """Record that group creation failed."""
        self._logger.error(
            "group_creation_failed",
            name=name,
            error=error,
            **self._get_context_kwargs(),
        )

    def group_slug_conflict(self, slug: str, existing_group_id: str) -> None:
        self._logger.warning(
            "group_slug_conflict",
            slug=slug,
            existing_group_id=existing_group_id,
            **self._get_context_kwargs(),
        )

    def group_renamed(self, group_id: str, old_slug: str, new_slug: str) -> None:
        self._logger.info(
            "group_renamed",
            group_id=group_id,
            old_slug=old_slug,
            new_slug=new_slug,
            **self._get_context_kwargs(),
        )

    def group_rename_skipped(self, group_id: str, slug: str) -> None:
        self._logger.debug(
            "group_rename_skipped",
            group_id=group_id,
            slug=slug,
            **self._get_context_kwargs(),
        )

    def group_deleted(self, group_id: str, member_count: int) -> None:
        self._logger.info(
            "group_deleted",
            group_id=group_id,
            member_count=member_count,
            **self._get_context_kwargs(),
        )

    def group_undeleted(self, group_id: str, member_count: int) -> None:
        self._logger.info(
            "group_undeleted",
            group_id=group_id,
            member_count=member_count,
            **self._get_context_kwargs(),
        )

    def group_not_found(self, group_id: str) -> None:
        self._logger.debug(
            "group_not_found",
            group_id=group_id,
            **self._get_context_kwargs(),
        )

    def group_operation_failed(self, operation: str, group_id: str, error: str) -> None:
        """Record that a group operation failed."""
        self._logger.error(
            "group_operation_failed",
            operation=operation,
            group_id=group_id,
            error=error,
            **self._get_context_kwargs(),
        )
