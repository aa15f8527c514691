"""Domain probe for membership storage gateway operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events of group and membership document persistence.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class RepositoryProbe(Protocol):
    """Domain probe for storage gateway operations.

    ``entity`` is the document kind ("group" or "membership").
    """

    def document_created(self, entity: str, document_id: str) -> None:
        """Record that a document was inserted."""
        ...

    def document_updated(
        self, entity: str, document_id: str, fields: list[str]
    ) -> None:
        """Record that a document was partially updated."""
        ...

    def document_not_found(self, entity: str, document_id: str) -> None:
        """Record that an update addressed a missing document."""
        ...

    def duplicate_document(self, entity: str, key: str) -> None:
        """Record that a uniqueness constraint rejected a write."""
        ...

    def invalid_document(self, entity: str, error: str) -> None:
        """Record that a stored record could not be translated."""
        ...

    def documents_filtered(self, entity: str, total: int, returned: int) -> None:
        """Record the outcome of a filtered multi-get."""
        ...

    def with_context(self, context: ObservationContext) -> RepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultRepositoryProbe:
    """Default implementation of RepositoryProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultRepositoryProbe(logger=self._logger, context=context)

    def document_created(self, entity: str, document_id: str) -> None:
        self._logger.info(
            "document_created",
            entity=entity,
            document_id=document_id,
            **self._get_context_kwargs(),
        )

    def document_updated(
        self, entity: str, document_id: str, fields: list[str]
    ) -> None:
        self._logger.debug(
            "document_updated",
            entity=entity,
            document_id=document_id,
            fields=fields,
            **self._get_context_kwargs(),
        )

    def document_not_found(self, entity: str, document_id: str) -> None:
        self._logger.debug(
            "document_not_found",
            entity=entity,
            document_id=document_id,
            **self._get_context_kwargs(),
        )

    def duplicate_document(self, entity: str, key: str) -> None:
        self._logger.warning(
            "duplicate_document",
            entity=entity,
            key=key,
            **self._get_context_kwargs(),
        )

    def invalid_document(self, entity: str, error: str) -> None:
        self._logger.error(
            "invalid_document",
            entity=entity,
            error=error,
            **self._get_context_kwargs(),
        )

    def documents_filtered(self, entity: str, total: int, returned: int) -> None:
        self._logger.debug(
            "documents_filtered",
            entity=entity,
            total=total,
            returned=returned,
            **self._get_context_kwargs(),
        )
