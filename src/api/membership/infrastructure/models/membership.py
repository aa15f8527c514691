"""SQLAlchemy ORM model for the memberships table."""

from sqlalchemy import BigInteger, Identity, Index, Integer, String, text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, SoftDeleteMixin, TimestampMixin


class MembershipModel(Base, TimestampMixin, SoftDeleteMixin):
    """ORM model for the memberships table (one row per user record).

    User ids are assigned externally and a user may accumulate soft-deleted
    rows over time, so rows carry their own surrogate key. A partial unique
    index allows at most one live row per user id.
    """

    __tablename__ = "memberships"
    __table_args__ = (
        Index(
            "uq_memberships_live_user",
            "user_id",
            unique=True,
            postgresql_where=text("NOT deleted"),
        ),
    )

    record_id: Mapped[int] = mapped_column(BigInteger, Identity(), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    groups: Mapped[list[str]] = mapped_column(
        ARRAY(String), nullable=False, default=list
    )
    count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<MembershipModel(record_id={self.record_id}, user_id={self.user_id}, "
            f"deleted={self.deleted})>"
        )
