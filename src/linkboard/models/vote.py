"""Models capturing voting interactions on links."""

from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    SmallInteger,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from linkboard.db.session import Base


class LinkVote(Base):
    """Vote held by a CAPTCHA session on a link.

    The composite primary key allows a single standing vote per session
    and link; undoing the vote deletes the row.
    """

    __tablename__ = "link_vote"
    __table_args__ = (
        CheckConstraint("direction IN (1, -1)", name="ck_link_vote_direction"),
        Index("ix_link_vote_link_id", "link_id"),
    )

    session_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("captcha_sessions.id", ondelete="CASCADE"),
        primary_key=True,
    )
    link_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("links.id", ondelete="CASCADE"),
        primary_key=True,
    )

    # 1 = upvote, -1 = downvote.
    direction: Mapped[int] = mapped_column(SmallInteger, nullable=False)
