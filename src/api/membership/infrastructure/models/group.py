"""SQLAlchemy ORM model for the groups table."""

from sqlalchemy import Index, Integer, String, text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, SoftDeleteMixin, TimestampMixin


class GroupModel(Base, TimestampMixin, SoftDeleteMixin):
    """ORM model for the groups table.

    Member ids are denormalized into an array column together with their
    count. Slugs are unique among live rows only, enforced by a partial
    unique index, so a soft-deleted group's slug can be reused.
    """

    __tablename__ = "groups"
    __table_args__ = (
        Index(
            "uq_groups_live_slug",
            "slug",
            unique=True,
            postgresql_where=text("NOT deleted"),
        ),
    )

    id: Mapped[str] = mapped_column(String(24), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    users: Mapped[list[str]] = mapped_column(
        ARRAY(String), nullable=False, default=list
    )
    count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<GroupModel(id={self.id}, slug={self.slug}, deleted={self.deleted})>"
