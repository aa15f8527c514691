"""Domain-Oriented Observability for membership infrastructure."""

from membership.infrastructure.observability.repository_probe import (
    DefaultRepositoryProbe,
    RepositoryProbe,
)

__all__ = ["DefaultRepositoryProbe", "RepositoryProbe"]
