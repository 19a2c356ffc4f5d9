"""Vote-related Pydantic schemas."""

from enum import Enum

from pydantic import BaseModel


class VoteAction(str, Enum):
    """Vote mutations accepted on ``/links/{id}/{action}``."""

    UPVOTE = "upvote"
    DOWNVOTE = "downvote"
    UNUPVOTE = "unupvote"
    UNDOWNVOTE = "undownvote"

    @property
    def direction(self) -> int:
        """1 for the upvote counter, -1 for the downvote counter."""
        return 1 if self in (VoteAction.UPVOTE, VoteAction.UNUPVOTE) else -1

    @property
    def undo(self) -> bool:
        return self in (VoteAction.UNUPVOTE, VoteAction.UNDOWNVOTE)


class VoteResponse(BaseModel):
    """Counters of the link after the vote was applied."""

    message: str
    link_id: int
    upvotes: int
    downvotes: int
    score: int
