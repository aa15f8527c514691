"""Development schema creation for the PostgreSQL storage gateway."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from infrastructure.database.models import Base
from membership.infrastructure import models  # noqa: F401 - registers tables


async def create_tables(engine: AsyncEngine) -> None:
    """Create the groups and memberships tables if they do not exist."""
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)
