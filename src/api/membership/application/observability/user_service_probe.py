"""Protocol for user application service observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class UserServiceProbe(Protocol):
    """Domain probe for user lifecycle operations."""

    def user_created(self, user_id: str) -> None:
        """Record that a membership record was created."""
        ...

    def user_already_exists(self, user_id: str) -> None:
        """Record that a live membership record already existed."""
        ...

    def user_deleted(self, user_id: str, group_count: int) -> None:
        """Record that a user was soft-deleted."""
        ...

    def user_not_found(self, user_id: str) -> None:
        """Record that a user had no live membership record."""
        ...

    def stale_group_skipped(self, user_id: str, group_id: str) -> None:
        """Record that a listed group was no longer live during user deletion."""
        ...

    def user_operation_failed(self, operation: str, user_id: str, error: str) -> None:
        """Record that a user operation failed."""
        ...

    def with_context(self, context: ObservationContext) -> UserServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultUserServiceProbe:
    """Default implementation of UserServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultUserServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultUserServiceProbe(logger=self._logger, context=context)

    def user_created(self, user_id: str) -> None:
        self._logger.info("user_created", user_id=user_id, **self._get_context_kwargs())

    def user_already_exists(self, user_id: str) -> None:
        self._logger.warning(
            "user_already_exists", user_id=user_id, **self._get_context_kwargs()
        )

    def user_deleted(self, user_id: str, group_count: int) -> None:
        self._logger.info(
            "user_deleted",
            user_id=user_id,
            group_count=group_count,
            **self._get_context_kwargs(),
        )

    def user_not_found(self, user_id: str) -> None:
        self._logger.debug(
            "user_not_found", user_id=user_id, **self._get_context_kwargs()
        )

    def stale_group_skipped(self, user_id: str, group_id: str) -> None:
        self._logger.debug(
            "stale_group_skipped",
            user_id=user_id,
            group_id=group_id,
            **self._get_context_kwargs(),
        )

    def user_operation_failed(self, operation: str, user_id: str, error: str) -> None:
        self._logger.error(
            "user_operation_failed",
            operation=operation,
            user_id=user_id,
            error=error,
            **self._get_context_kwargs(),
        )
