"""SQLAlchemy model for submitted links."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from linkboard.db.session import Base
from linkboard.db.time import utcnow

LINK_STATUS_PENDING = "pending"
LINK_STATUS_APPROVED = "approved"


class Link(Base):
    """A submitted link and its raw vote counters.

    Links start out `pending` and only appear in listings once an operator
    approves them. Counters are adjusted in place by single-row updates.
    """

    __tablename__ = "links"
    __table_args__ = (
        CheckConstraint("status IN ('approved', 'pending')", name="ck_links_status"),
        Index("ix_links_status", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    upvotes: Mapped[int] = mapped_column(default=0, nullable=False)
    downvotes: Mapped[int] = mapped_column(default=0, nullable=False)
    status: Mapped[str] = mapped_column(
        String(16),
        default=LINK_STATUS_PENDING,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )
