"""Database infrastructure - shared connection primitives."""

from infrastructure.database.engines import (
    build_async_url,
    create_engine,
    create_session_factory,
)
from infrastructure.database.models import Base, SoftDeleteMixin, TimestampMixin

__all__ = [
    "Base",
    "SoftDeleteMixin",
    "TimestampMixin",
    "build_async_url",
    "create_engine",
    "create_session_factory",
]
